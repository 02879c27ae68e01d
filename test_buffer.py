import os
import tempfile
import unittest

from buffer import INITIAL_CAPACITY, Buffer, make_buffer, read_file
from md5 import md5_hash


class TestBuffer(unittest.TestCase):

    def test_new_buffer_is_empty(self):
        b = make_buffer()
        self.assertEqual(len(b), 0)
        self.assertEqual(b.cap, INITIAL_CAPACITY)
        self.assertEqual(b.data, b'')

    def test_capacity_doubles(self):
        b = make_buffer()
        caps = []
        for i in range(25):
            b.append(i)
            caps.append(b.cap)
            self.assertLessEqual(len(b), b.cap)
        self.assertEqual(sorted(set(caps)), [3, 6, 12, 24, 48])
        self.assertEqual(b.data, bytes(range(25)))

    def test_not_text(self):
        b = make_buffer(b'a\0b\0\xff')
        self.assertEqual(len(b), 5)
        self.assertEqual(b[1], 0)
        self.assertEqual(b[-1], 0xff)
        self.assertEqual(list(b), [0x61, 0, 0x62, 0, 0xff])

    def test_rejects_non_bytes(self):
        b = make_buffer()
        with self.assertRaises(ValueError):
            b.append(256)
        with self.assertRaises(ValueError):
            b.append(-1)
        with self.assertRaises(ValueError):
            Buffer(0)

    def test_free(self):
        b = make_buffer(b'hello')
        b.free()
        self.assertEqual(len(b), 0)
        self.assertEqual(b.cap, 0)

    def test_refill_after_free(self):
        b = make_buffer(b'hello')
        b.free()
        b.extend(b'abc')
        self.assertEqual(b.data, b'abc')
        self.assertLessEqual(len(b), b.cap)
        self.assertEqual(md5_hash(b).hex(), '900150983cd24fb0d6963f7d28e17f72')

    def test_indexing_stays_within_length(self):
        b = make_buffer(b'abcd')
        self.assertEqual(b.cap, 6)
        self.assertEqual(b[0], 0x61)
        self.assertEqual(b[-1], 0x64)
        self.assertEqual(b[-4], 0x61)
        for i in (4, 5, -5):
            with self.assertRaises(IndexError):
                b[i]
        self.assertEqual(b[1:], b'bcd')
        self.assertEqual(b[:10], b'abcd')
        self.assertEqual(b[::-1], b'dcba')
        self.assertEqual(b[::2], b'ac')
        self.assertEqual(b[5:], b'')

    def test_iteration_sees_later_appends(self):
        b = make_buffer(b'ab')
        it = iter(b)
        self.assertEqual(next(it), 0x61)
        b.append(0x63)
        self.assertEqual(list(it), [0x62, 0x63])


class TestReadFile(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_reads_raw_bytes(self):
        content = bytes(range(256)) * 40
        path = os.path.join(self.tmpdir.name, 'data.bin')
        with open(path, 'wb') as f:
            f.write(content)
        b = read_file(path)
        self.assertEqual(b.data, content)
        self.assertLessEqual(len(b), b.cap)

    def test_empty_file(self):
        path = os.path.join(self.tmpdir.name, 'empty')
        open(path, 'wb').close()
        self.assertEqual(len(read_file(path)), 0)

    def test_missing_file(self):
        self.assertIsNone(read_file(os.path.join(self.tmpdir.name, 'nope')))


if __name__ == '__main__':
    unittest.main()
