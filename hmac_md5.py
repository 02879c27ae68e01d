"""HMAC-MD5 built from two passes of md5_hash.

Keys longer than one block are NOT hashed down first as RFC 2104 asks;
only their first 64 bytes are used. Outputs for such keys therefore differ
from other HMAC-MD5 implementations. For keys up to 64 bytes the result is
standard HMAC-MD5.

>>> hmac_md5(b'Jefe', b'what do ya want for nothing?').hex()
'750c783e6ab0b503eaa86e310a5db738'
"""

import logging

from buffer import Buffer, make_buffer
from md5 import BLOCK_SIZE, md5_hash

logger = logging.getLogger(__name__)

IPAD_BYTE = 0x36
OPAD_BYTE = 0x5c


def make_pads(key):
    '''XOR the key, zero extended to a block, against the inner and outer pad bytes'''
    if isinstance(key, str):
        key = key.encode('utf-8')
    if len(key) > BLOCK_SIZE:
        logger.warning('HMAC key is %d bytes, only the first %d are used', len(key), BLOCK_SIZE)

    ipad = bytearray(BLOCK_SIZE)
    opad = bytearray(BLOCK_SIZE)
    for i in range(BLOCK_SIZE):
        if i < len(key):
            ipad[i] = key[i] ^ IPAD_BYTE
            opad[i] = key[i] ^ OPAD_BYTE
        else:
            ipad[i], opad[i] = IPAD_BYTE, OPAD_BYTE
    return bytes(ipad), bytes(opad)


def hmac_md5(key, message):
    '''HMAC-MD5 of message (a Buffer or bytes) under key. The message is copied, never padded.'''
    ipad, opad = make_pads(key)
    if isinstance(message, Buffer):
        message = message.data

    inner = make_buffer(ipad)
    inner.extend(message)
    inner_digest = md5_hash(inner)

    outer = make_buffer(opad)
    outer.extend(inner_digest)
    return md5_hash(outer)
