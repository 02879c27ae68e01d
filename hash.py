#!/usr/bin/env python3
"""
hash.py - print the MD5 digest, or the HMAC-MD5 under a key, of a file.

Usage:
  hash <filename>
  hash -hmac <key> <filename>

The digest is printed as 32 uppercase hex digits. Both a malformed command
line and an unreadable file exit with status 1.

Log level comes from the HASH_LOG_LEVEL environment variable (default WARNING).
"""

from __future__ import annotations

import argparse
import binascii
import logging
import os
import sys

from buffer import read_file
from hmac_md5 import hmac_md5
from md5 import md5_hash

logger = logging.getLogger(__name__)

USAGE = 'hash [-hmac <key>] <filename>'


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        logger.debug('bad command line: %s', message)
        self.print_usage(sys.stderr)
        self.exit(1)


def _build_parser() -> argparse.ArgumentParser:
    ap = _Parser(prog='hash', usage=USAGE, add_help=False, allow_abbrev=False)
    ap.add_argument('words', nargs='*')
    return ap


def _parse_args(argv: list) -> tuple:
    """
    Split the command line by position into (key, filename); key is None
    for plain MD5. Keys and filenames may start with '-'.
    """
    ap = _build_parser()
    # everything after '--' is positional
    words = ap.parse_args(['--'] + list(argv)).words
    if len(words) == 1:
        return None, words[0]
    if len(words) == 3 and words[0] == '-hmac':
        return words[1], words[2]
    ap.error('expected <filename> or -hmac <key> <filename>, got {} arguments'.format(len(words)))


def _configure_logging() -> None:
    level = os.environ.get('HASH_LOG_LEVEL', 'WARNING').upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def format_digest(digest: bytes) -> str:
    return binascii.hexlify(digest).decode().upper()


def main(argv: list | None = None) -> int:
    _configure_logging()
    key, filename = _parse_args(sys.argv[1:] if argv is None else argv)

    buff = read_file(filename)
    if buff is None:
        print("Can't open file: {}".format(filename), file=sys.stderr)
        return 1

    if key is not None:
        logger.debug('computing HMAC-MD5 of %s', filename)
        digest = hmac_md5(os.fsencode(key), buff)
    else:
        digest = md5_hash(buff)

    print(format_digest(digest))
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
