#!/usr/bin/env python3

"""An implementation of MD5 built up directly from the primitives of the MD5
specification (RFC 1321): state initialization, padding, the 64-step block
compression and little-endian digest encoding.

The message is consumed as one complete Buffer; each stage is exposed so
HMAC and the tests can drive them separately."""

__version__ = '1.0'

import enum
import logging
import math
import binascii

from buffer import Buffer, make_buffer

logger = logging.getLogger(__name__)

# util
bin_to_words = lambda x: [x[4*i:4*(i+1)] for i in range(len(x)//4)]
words_to_bin = lambda x: b''.join(x)
word_to_int = lambda x: int.from_bytes(x, 'little')
int_to_word = lambda x: x.to_bytes(4, 'little')
bin_to_int = lambda x: list(map(word_to_int, bin_to_words(x)))
int_to_bin = lambda x: words_to_bin(map(int_to_word, x))
mod32bit = lambda x: x % 2**32
rotleft = lambda x,n: mod32bit((x << n) | (x >> (32-n)))

# initial state
IHV0_HEX = '0123456789abcdeffedcba9876543210'
IHV0 = tuple(bin_to_int(binascii.unhexlify(IHV0_HEX.encode())))

# parameters
BLOCK_SIZE = 64 # 512 bits (64 bytes)
DIGEST_SIZE = 16
ROUNDS = BLOCK_SIZE
WORDS = BLOCK_SIZE // 4

# marker byte and length field of the padding
PAD_MARKER = 0x80
PAD_CONSTANT = 55
LENGTH_SIZE = 8

# addition constants
AC = tuple(int(2**32 * abs(math.sin(t+1))) for t in range(ROUNDS))

# rotation constants
RC = tuple([7,12,17,22] * 4 + [5,9,14,20] * 4 + [4,11,16,23] * 4 + [6,10,15,21] * 4)


class RoundKind(enum.IntEnum):
    """The four 16-step rounds of a block, each with its own non-linear
    function and message word order."""
    F = 0
    G = 1
    H = 2
    I = 3

    @classmethod
    def of(cls, i):
        return cls(i // WORDS)

    def mix(self, b, c, d):
        if self is RoundKind.F:
            r = (b & c) | (~b & d)
        elif self is RoundKind.G:
            r = (b & d) | (c & ~d)
        elif self is RoundKind.H:
            r = b ^ c ^ d
        else:
            r = c ^ (b | ~d)
        return mod32bit(r)

    def index(self, i):
        if self is RoundKind.F:
            return i
        elif self is RoundKind.G:
            return (5*i + 1) % WORDS
        elif self is RoundKind.H:
            return (3*i + 5) % WORDS
        return (7*i) % WORDS


class MD5State:
    """The four 32-bit words A, B, C, D of an MD5 computation.
    Only meaningful after init_state()."""

    __slots__ = ('A', 'B', 'C', 'D')

    def __init__(self):
        self.A = self.B = self.C = self.D = 0

    def words(self):
        return (self.A, self.B, self.C, self.D)

    def __repr__(self):
        return 'MD5State({})'.format(', '.join('{:08x}'.format(w) for w in self.words()))


def init_state(state=None):
    '''Fill the state with the initial values from RFC 1321 and return it'''
    if state is None:
        state = MD5State()
    state.A, state.B, state.C, state.D = IHV0
    return state


def pad_buffer(b):
    '''Bring the buffer length up to a multiple of 64 bytes: marker byte, zeros,
    then the original length in bits as 8 little-endian bytes.

    >>> b = make_buffer(b'abc')
    >>> pad_buffer(b)
    >>> len(b), b[3], b[56:]
    (64, 128, b'\\x18\\x00\\x00\\x00\\x00\\x00\\x00\\x00')
    '''
    old_len = len(b)
    b.append(PAD_MARKER)

    # 55 - old_len may go negative, % wraps it into the next block
    for _ in range((PAD_CONSTANT - old_len) % BLOCK_SIZE):
        b.append(0)

    bits = (old_len * 8) % 2**64
    b.extend(bits.to_bytes(LENGTH_SIZE, 'little'))


def md5_block(block, state):
    '''Run the 64 MD5 iterations over one 64-byte block, updating state in place'''
    if len(block) != BLOCK_SIZE:
        raise ValueError('block must be {} bytes, got {}'.format(BLOCK_SIZE, len(block)))

    w = bin_to_int(bytes(block))
    a, b, c, d = state.words()

    for i in range(ROUNDS):
        kind = RoundKind.of(i)
        t = mod32bit(a + kind.mix(b, c, d) + AC[i] + w[kind.index(i)])
        a, b, c, d = d, mod32bit(b + rotleft(t, RC[i])), b, c

    state.A = mod32bit(state.A + a)
    state.B = mod32bit(state.B + b)
    state.C = mod32bit(state.C + c)
    state.D = mod32bit(state.D + d)


def md5_encode(state):
    '''Digest bytes: A, B, C then D, each low-order byte first'''
    return int_to_bin(state.words())


def md5_hash(b):
    '''MD5 digest of a buffer.

    A Buffer is padded in place, so it can't be hashed a second time.
    Plain bytes are copied into a private buffer first.'''
    if not isinstance(b, Buffer):
        b = make_buffer(b)

    pad_buffer(b)
    data = b.data
    state = init_state()
    for offset in range(0, len(data), BLOCK_SIZE):
        md5_block(data[offset:offset + BLOCK_SIZE], state)

    logger.debug('compressed %d blocks', len(data) // BLOCK_SIZE)
    return md5_encode(state)


class MD5:
    """Implementation of MD5

    Expected outputs:
    >>> MD5(b'').hexdigest()
    'd41d8cd98f00b204e9800998ecf8427e'
    >>> MD5(b'a').hexdigest()
    '0cc175b9c0f1b6a831c399e269772661'
    >>> MD5(b'abc').hexdigest()
    '900150983cd24fb0d6963f7d28e17f72'
    >>> MD5(b'message digest').hexdigest()
    'f96b697d7cb7938d525a2f31aaf161d0'
    >>> MD5(b'abcdefghijklmnopqrstuvwxyz').hexdigest()
    'c3fcd3d76192e4007dfb496cca67e13b'
    >>> MD5(b'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789').hexdigest()
    'd174ab98d277d9f5a5611c2c9f419d9f'
    >>> MD5(b'12345678901234567890123456789012345678901234567890123456789012345678901234567890').hexdigest()
    '57edf4a22be3c955ac49da2e2107b67a'
    """

    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data=b''):
        if isinstance(data, Buffer):
            data = data.data
        self._data = bytes(data)
        self._digest = None

    def digest(self):
        if self._digest is None:
            self._digest = md5_hash(self._data)
        return self._digest

    def hexdigest(self):
        return binascii.hexlify(self.digest()).decode()


def md5(data=b''):
    return MD5(data)


if __name__ == '__main__':
    # check the standard MD5 suite expected outputs in the docstrings
    import doctest
    doctest.testmod(verbose=True)
