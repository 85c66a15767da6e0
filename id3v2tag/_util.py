# Copyright (C) 2005  Michael Urman
#               2013  Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of version 2 of the GNU General Public License as
# published by the Free Software Foundation.

from __future__ import annotations

from collections.abc import Sequence
from io import BytesIO
from typing import IO, Final, NamedTuple


class error(Exception):
    pass


class ID3NoHeaderError(error, ValueError):
    pass


class ID3UnsupportedVersionError(error, NotImplementedError):
    pass


class ID3SizeFormatError(error, ValueError):
    pass


class ID3SizeOverflowError(error, ValueError):
    pass


class ID3BodyOverflowError(error, ValueError):
    pass


class ID3BlankFrameError(error, ValueError):
    pass


class ID3JunkFrameError(error, ValueError):
    pass


class ID3InvalidLanguageLengthError(error, ValueError):
    pass


class ID3NoFileError(error, ValueError):
    pass


class ID3Warning(error, UserWarning):
    pass


class ID3SaveConfig(NamedTuple):

    v2_version: int = 4
    """Major version of the written tag, selects the frame size mode"""


class ParseOptions(NamedTuple):

    parse: bool = True
    """If False only the tag header is read"""

    parse_frames: Sequence[str] = ()
    """Frame IDs or descriptions to load, all frames if empty"""


SYNCHSAFE_MAX_SIZE: Final = (1 << 28) - 1
"""Largest value a synch-safe size field can hold"""

SYNCHUNSAFE_MAX_SIZE: Final = (1 << 32) - 1
"""Largest value a raw 4 byte size field can hold"""


class BitPaddedInt(int):
    """An integer stored in bytes of which only the lower `bits` bits
    carry value.
    """

    bits: int
    bigendian: bool

    def __new__(cls, value: int | bytes, bits: int = 7, bigendian: bool = True):

        mask = (1 << (bits)) - 1
        numeric_value = 0
        shift = 0

        if isinstance(value, int):
            if value < 0:
                raise ValueError("negative value: %d" % value)
            while value:
                numeric_value += (value & mask) << shift
                value >>= 8
                shift += bits
        elif isinstance(value, bytes):
            if bigendian:
                value = bytes(reversed(value))
            for byte in bytearray(value):
                numeric_value += (byte & mask) << shift
                shift += bits
        else:
            raise TypeError

        self = int.__new__(cls, numeric_value)
        self.bits = bits
        self.bigendian = bigendian
        return self

    @staticmethod
    def to_str(value: int, bits: int = 7, bigendian: bool = True,
               width: int = 4, minwidth: int = 4) -> bytes:
        mask = (1 << bits) - 1

        if width != -1:
            index = 0
            bytes_ = bytearray(width)
            try:
                while value:
                    bytes_[index] = value & mask
                    value >>= bits
                    index += 1
            except IndexError:
                raise ValueError('Value too wide (>%d bytes)' % width) from None
        else:
            # POPM uses a growing integer of at least 4 bytes (=minwidth)
            # as play counter.
            bytes_ = bytearray()
            append = bytes_.append
            while value:
                append(value & mask)
                value >>= bits
            bytes_ = bytes_.ljust(minwidth, b"\x00")

        if bigendian:
            bytes_.reverse()
        return bytes(bytes_)

    @staticmethod
    def has_valid_padding(value: int | bytes, bits: int = 7) -> bool:
        """Whether the padding bits are all zero"""

        assert bits <= 8

        mask = (((1 << (8 - bits)) - 1) << bits)

        if isinstance(value, int):
            while value:
                if value & mask:
                    return False
                value >>= 8
        elif isinstance(value, bytes):
            for byte in bytearray(value):
                if byte & mask:
                    return False
        else:
            raise TypeError

        return True


def encode_size(size: int, synchsafe: bool = True) -> bytes:
    """Encode a tag or frame size into a 4 byte field.

    Args:
        size (int): the value to store
        synchsafe (bool): 7 bits per byte if True, else all 8 bits
    Returns:
        bytes: 4 bytes, big endian
    Raises:
        ID3SizeOverflowError: if the value does not fit
    """

    limit = SYNCHSAFE_MAX_SIZE if synchsafe else SYNCHUNSAFE_MAX_SIZE
    if not 0 <= size <= limit:
        raise ID3SizeOverflowError(
            "size %d out of range (max %d)" % (size, limit))
    return BitPaddedInt.to_str(size, bits=7 if synchsafe else 8, width=4)


def decode_size(data: bytes, synchsafe: bool = True) -> int:
    """Decode a 4 byte size field.

    Raises:
        ID3SizeFormatError: if a synch-safe field has a high bit set
    """

    if len(data) > 4:
        raise ID3SizeFormatError("size field longer than 4 bytes")
    if synchsafe:
        if not BitPaddedInt.has_valid_padding(data):
            raise ID3SizeFormatError(f"invalid synch-safe size {data!r}")
        return int(BitPaddedInt(data))
    return int(BitPaddedInt(data, bits=8))


class BoundedReader:
    """Reads at most `limit` bytes from a file object.

    Used for the frame area of a tag and for the embedded frames of a
    chapter, so a nested scan can never read past its parent.
    """

    _CHUNK: Final = 32 * 1024

    def __init__(self, fileobj: IO[bytes], limit: int):
        self._fileobj = fileobj
        self._remaining = max(limit, 0)

    @classmethod
    def from_bytes(cls, data: bytes) -> BoundedReader:
        return cls(BytesIO(data), len(data))

    @property
    def remaining(self) -> int:
        """Bytes that may still be read"""

        return self._remaining

    def read(self, size: int = -1) -> bytes:
        if size < 0 or size > self._remaining:
            size = self._remaining
        data = self._fileobj.read(size)
        self._remaining -= len(data)
        return data

    def skip(self, size: int) -> int:
        """Discard up to `size` bytes, returns how many were discarded"""

        skipped = 0
        while skipped < size:
            data = self.read(min(self._CHUNK, size - skipped))
            if not data:
                break
            skipped += len(data)
        return skipped
