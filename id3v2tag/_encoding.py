# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Text encodings of ID3v2.3/2.4 frames.

Every encoded string in a frame is preceded (once per frame) by an
encoding byte. The four encodings differ in their code unit width,
which also decides the width of the terminator between values.
"""

from __future__ import annotations

import codecs
from collections.abc import Iterator
from enum import IntEnum
from typing import Final

from ._util import error


class Encoding(IntEnum):
    """Text Encoding"""

    LATIN1 = 0
    """ISO-8859-1"""

    UTF16 = 1
    """UTF-16 with BOM"""

    UTF16BE = 2
    """UTF-16BE without BOM"""

    UTF8 = 3
    """UTF-8"""

    @property
    def terminator(self) -> bytes:
        """The byte sequence ending a value in this encoding"""

        return _encodings[self][1]

    @property
    def codec(self) -> str:
        """Python codec name used for encoding"""

        return _encodings[self][0]

    def _pprint(self) -> str:
        return self.name.lower()


_encodings: Final = {
    Encoding.LATIN1: ('latin1', b'\x00'),
    Encoding.UTF16: ('utf-16-le', b'\x00\x00'),
    Encoding.UTF16BE: ('utf-16-be', b'\x00\x00'),
    Encoding.UTF8: ('utf-8', b'\x00'),
}


def get_encoding(key: int) -> Encoding:
    """Returns the encoding for an encoding byte, UTF-8 for unknown keys"""

    try:
        return Encoding(key)
    except ValueError:
        return Encoding.UTF8


def iter_text_fixups(data: bytes, encoding: Encoding) -> Iterator[bytes]:
    """Yields a series of repaired text values for decoding"""

    yield data
    if encoding in (Encoding.UTF16, Encoding.UTF16BE) and len(data) % 2:
        # wrong termination
        yield data + b"\x00"


def _decode(data: bytes, encoding: Encoding) -> str:
    if encoding == Encoding.UTF16:
        if data.startswith(codecs.BOM_UTF16_LE):
            return data[2:].decode('utf-16-le')
        elif data.startswith(codecs.BOM_UTF16_BE):
            return data[2:].decode('utf-16-be')
        # no BOM, assume big endian
        return data.decode('utf-16-be')
    return data.decode(encoding.codec)


def decode_text(data: bytes, encoding: Encoding) -> str:
    """Decode a single value, a trailing terminator is removed.

    Never fails, undecodable data is returned byte by byte.
    """

    term = encoding.terminator
    if data.endswith(term) and (len(term) == 1 or len(data) % 2 == 0):
        data = data[:-len(term)]

    if encoding == Encoding.UTF16 and data == codecs.BOM_UTF16_LE:
        return ""

    for fixed in iter_text_fixups(data, encoding):
        try:
            return _decode(fixed, encoding)
        except UnicodeDecodeError:
            pass
    return data.decode('latin1')


def encode_text(text: str, encoding: Encoding) -> bytes:
    """Encode a value without terminator.

    UTF-16 values get a leading BOM and use little endian.

    Raises:
        error: if the text can't be represented in the encoding
    """

    try:
        data = text.encode(encoding.codec)
    except UnicodeEncodeError as e:
        raise error(e) from e
    if encoding == Encoding.UTF16:
        data = codecs.BOM_UTF16_LE + data
    return data


def encoded_size(text: str, encoding: Encoding) -> int:
    """Length of `encode_text(text, encoding)`"""

    if encoding == Encoding.LATIN1:
        return len(text)
    return len(encode_text(text, encoding))


def _find_terminator(data: bytes, encoding: Encoding) -> int:
    term = encoding.terminator
    if len(term) == 1:
        return data.find(term)

    # only look at code unit boundaries
    index = 0
    while True:
        index = data.find(term, index)
        if index == -1 or index % 2 == 0:
            return index
        index += 1


def read_terminated(data: bytes, encoding: Encoding) -> tuple[bytes, bytes]:
    """Split off the value up to the first terminator.

    Returns:
        (value, rest): the raw value without terminator and everything
        after the terminator. If there is none, all data is the value.
    """

    index = _find_terminator(data, encoding)
    if index == -1:
        return data, b""
    return data[:index], data[index + len(encoding.terminator):]


def decode_multi(data: bytes, encoding: Encoding) -> list[str]:
    """Decode values packed back to back, separated by terminators"""

    term = encoding.terminator
    # strip one trailing terminator, UTF-16 ones only at a code unit boundary
    if data.endswith(term) and (len(term) == 1 or len(data) % 2 == 0):
        data = data[:-len(term)]

    values: list[str] = []
    while True:
        index = _find_terminator(data, encoding)
        if index == -1:
            values.append(decode_text(data, encoding))
            return values
        values.append(decode_text(data[:index], encoding))
        data = data[index + len(term):]
