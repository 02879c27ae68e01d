"""A growable array of raw bytes.

Holds the complete contents of an input file (not a string) so the MD5
computation can append its padding directly to the end of it."""

import logging

logger = logging.getLogger(__name__)

# starting size of the backing array, doubled whenever it fills up
INITIAL_CAPACITY = 3


class Buffer:
    """Resizable byte array with an explicit length and capacity.

    >>> b = make_buffer()
    >>> len(b), b.cap
    (0, 3)
    >>> b.extend(b'abcd')
    >>> len(b), b.cap
    (4, 6)
    >>> b.data
    b'abcd'
    """

    def __init__(self, cap=INITIAL_CAPACITY):
        if cap < 1:
            raise ValueError('capacity must be positive, got {}'.format(cap))
        self.cap = cap
        self.len = 0
        self._data = bytearray(cap)

    def append(self, byte):
        '''Add a single byte to the end, enlarging the backing array if necessary'''
        if not 0 <= byte <= 0xff:
            raise ValueError('not a byte value: {}'.format(byte))
        if self.len >= self.cap:
            self.cap = max(1, self.cap * 2)
            self._data.extend(bytes(self.cap - len(self._data)))
        self._data[self.len] = byte
        self.len += 1

    def extend(self, data):
        '''Append every byte of data in order'''
        for byte in data:
            self.append(byte)

    def free(self):
        '''Release the backing array; the buffer is left empty and can be refilled'''
        self._data = bytearray()
        self.len = 0
        self.cap = 0

    @property
    def data(self):
        return bytes(self._data[:self.len])

    def __len__(self):
        return self.len

    def __getitem__(self, key):
        if isinstance(key, slice):
            return bytes(self._data[i] for i in range(*key.indices(self.len)))
        if key < 0:
            key += self.len
        if not 0 <= key < self.len:
            raise IndexError('buffer index out of range')
        return self._data[key]

    def __iter__(self):
        for i in range(self.len):
            yield self._data[i]

    def __repr__(self):
        return 'Buffer(len={}, cap={})'.format(self.len, self.cap)


def make_buffer(data=b''):
    '''Create a new buffer, optionally filled with initial bytes'''
    b = Buffer()
    b.extend(data)
    return b


def read_file(filename):
    '''Read the whole file into a new buffer. Returns None if the file can't be opened.'''
    try:
        f = open(filename, 'rb')
    except OSError as e:
        logger.debug('cannot open %s: %s', filename, e)
        return None

    b = make_buffer()
    with f:
        while True:
            chunk = f.read(4096)
            if not chunk:
                break
            b.extend(chunk)

    logger.debug('read %d bytes from %s', len(b), filename)
    return b
