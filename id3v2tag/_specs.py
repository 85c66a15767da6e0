# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import struct
from enum import IntEnum
from typing import TYPE_CHECKING, NamedTuple, Protocol, cast, final, override

from ._encoding import (
    Encoding,
    decode_multi,
    decode_text,
    encode_text,
    encoded_size,
    get_encoding,
    read_terminated,
)
from ._util import (
    BitPaddedInt,
    BoundedReader,
    ID3BodyOverflowError,
    ID3InvalidLanguageLengthError,
    ID3SaveConfig,
    error,
)

if TYPE_CHECKING:
    from ._frames import Frame
    from ._tags import ID3Header


class PictureType(IntEnum):
    """Enumeration of image types defined by the ID3 standard for the APIC
    frame.
    """

    OTHER = 0
    """Other"""

    FILE_ICON = 1
    """32x32 pixels 'file icon' (PNG only)"""

    OTHER_FILE_ICON = 2
    """Other file icon"""

    COVER_FRONT = 3
    """Cover (front)"""

    COVER_BACK = 4
    """Cover (back)"""

    LEAFLET_PAGE = 5
    """Leaflet page"""

    MEDIA = 6
    """Media (e.g. label side of CD)"""

    LEAD_ARTIST = 7
    """Lead artist/lead performer/soloist"""

    ARTIST = 8
    """Artist/performer"""

    CONDUCTOR = 9
    """Conductor"""

    BAND = 10
    """Band/Orchestra"""

    COMPOSER = 11
    """Composer"""

    LYRICIST = 12
    """Lyricist/text writer"""

    RECORDING_LOCATION = 13
    """Recording Location"""

    DURING_RECORDING = 14
    """During recording"""

    DURING_PERFORMANCE = 15
    """During performance"""

    SCREEN_CAPTURE = 16
    """Movie/video screen capture"""

    FISH = 17
    """A bright coloured fish"""

    ILLUSTRATION = 18
    """Illustration"""

    BAND_LOGOTYPE = 19
    """Band/artist logotype"""

    PUBLISHER_LOGOTYPE = 20
    """Publisher/Studio logotype"""

    def _pprint(self) -> str:
        return self.name.lower().replace("_", " ")


class TimestampFormat(IntEnum):
    """Unit of the time stamps in a SYLT frame"""

    UNKNOWN = 0

    MPEG_FRAMES = 1
    """Absolute time, MPEG frames as unit"""

    MILLISECONDS = 2
    """Absolute time, milliseconds as unit"""


class ContentType(IntEnum):
    """Kind of text stored in a SYLT frame"""

    OTHER = 0
    LYRICS = 1
    TRANSCRIPTION = 2
    MOVEMENT = 3
    EVENTS = 4
    CHORD = 5
    TRIVIA = 6
    WEBPAGE_URLS = 7
    IMAGE_URLS = 8


class SynchronizedText(NamedTuple):
    """One entry of a SYLT frame"""

    text: str
    timestamp: int


class SpecError(Exception):
    pass


class Spec[T](Protocol):

    handle_nodata: bool = False
    """If reading empty data is possible and writing it back will again
    result in no data.
    """
    name: str
    default: T

    def __init__(self, name: str, default: T):
        self.name = name
        self.default = default

    @override
    def __hash__(self) -> int:
        raise TypeError("Spec objects are unhashable")

    def read(self, header: ID3Header, frame: Frame, data: bytes) -> tuple[object, bytes]:
        """
        Returns:
            (value: object, left_data: bytes)
        Raises:
            SpecError
        """

        raise NotImplementedError

    def write(self, config: ID3SaveConfig, frame: Frame, value) -> bytes:
        """
        Returns:
            bytes: The serialized data
        Raises:
            SpecError
        """
        raise NotImplementedError

    def size(self, frame: Frame, value) -> int:
        """
        Returns:
            int: the length of what `write` returns for value
        """

        return len(self.write(ID3SaveConfig(), frame, value))

    def validate(self, frame: Frame, value) -> object:
        """
        Returns:
            the validated value
        Raises:
            ValueError
            TypeError
        """

        raise NotImplementedError


class ByteSpec(Spec[int]):

    def __init__(self, name: str, default: int=0):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes) -> tuple[int, bytes]:
        return data[0], data[1:]

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: int) -> bytes:
        try:
            return bytes((value,))
        except ValueError as e:
            raise SpecError(e) from e

    @override
    def size(self, frame: Frame, value: int) -> int:
        return 1

    @override
    def validate(self, frame: Frame, value: int | None):
        if value is None:
            raise TypeError(f"{self.name} has to be an int")
        if not 0 <= value <= 255:
            raise ValueError(f"{self.name} out of range: {value!r}")
        return value


class PictureTypeSpec(ByteSpec):

    def __init__(self, name: str, default: PictureType=PictureType.COVER_FRONT):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        value, data = ByteSpec.read(self, header, frame, data)
        return self._to_type(value), data

    @override
    def validate(self, frame: Frame, value: int | None):
        value = ByteSpec.validate(self, frame, value)
        return self._to_type(value)

    @staticmethod
    def _to_type(value: int) -> PictureType | int:
        # values above 20 are reserved, keep them as they are
        try:
            return PictureType(value)
        except ValueError:
            return value


class EncodingSpec(ByteSpec):

    def __init__(self, name: str, default: Encoding=Encoding.UTF16):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        enc, data = super().read(header, frame, data)
        return get_encoding(enc), data

    @override
    def validate(self, frame: Frame, value: int | None):
        if value is None:
            raise TypeError
        if value not in (Encoding.LATIN1, Encoding.UTF16, Encoding.UTF16BE,
                         Encoding.UTF8):
            raise ValueError(f'Invalid Encoding: {value!r}')
        return Encoding(value)


class StringSpec(Spec[str]):
    """A fixed size Latin-1 payload, used for ISO 639-2 language codes."""

    len: int

    def __init__(self, name: str, length: int, default: str | None=None):
        if default is None:
            default = "XXX"[:length].ljust(length)
        super().__init__(name, default)
        self.len = length

    handle_nodata = True

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        chunk = data[:self.len]
        if len(chunk) != self.len:
            raise ID3InvalidLanguageLengthError(
                f"{self.name} needs {self.len} bytes, got {len(chunk)}")
        return chunk.decode("latin1"), data[self.len:]

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: str):
        try:
            data = value.encode("latin1")
        except UnicodeEncodeError as e:
            raise SpecError(e) from e
        if len(data) != self.len:
            raise ID3InvalidLanguageLengthError(
                f"{self.name} has to be {self.len} characters: {value!r}")
        return data

    @override
    def size(self, frame: Frame, value: str) -> int:
        return self.len

    @override
    def validate(self, frame: Frame, value: str | None | object):
        if not isinstance(value, str):
            raise TypeError(f"{self.name} has to be str")
        return value


class IntegerSpec(Spec[int]):
    """A big endian integer filling the rest of the frame, at least
    4 bytes when written.
    """

    handle_nodata = True

    def __init__(self, name: str, default: int=0):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        return int(BitPaddedInt(data, bits=8)), b''

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: int):
        return BitPaddedInt.to_str(value, bits=8, width=-1)

    @override
    def validate(self, frame: Frame, value: int | None):
        if not isinstance(value, int):
            raise TypeError(f"{self.name} has to be an int")
        if value < 0:
            raise ValueError(f"{self.name} can't be negative")
        return value


class SizedIntegerSpec(Spec[int]):

    name: str
    __sz: int
    default: int

    def __init__(self, name: str, size: int, default: int):
        self.name, self.__sz = name, size
        self.default = default

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        if len(data) < self.__sz:
            raise SpecError("not enough data")
        return int(BitPaddedInt(data[:self.__sz], bits=8)), data[self.__sz:]

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: int):
        try:
            return BitPaddedInt.to_str(value, bits=8, width=self.__sz)
        except ValueError as e:
            raise SpecError(e) from e

    @override
    def size(self, frame: Frame, value: int) -> int:
        return self.__sz

    @override
    def validate(self, frame: Frame, value: int | None):
        if not isinstance(value, int):
            raise TypeError(f"{self.name} has to be an int")
        if not 0 <= value < 1 << (8 * self.__sz):
            raise ValueError(f"{self.name} out of range: {value!r}")
        return value


class BinaryDataSpec(Spec[bytes]):

    handle_nodata: bool = True

    def __init__(self, name: str, default: bytes=b""):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        return data, b''

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: bytes):
        return value

    @override
    def size(self, frame: Frame, value: bytes) -> int:
        return len(value)

    @override
    def validate(self, frame: Frame, value: bytes | object | None) -> bytes:
        if value is None:
            raise TypeError
        if isinstance(value, bytes | bytearray):
            return bytes(value)
        else:
            raise TypeError(f"{self.name} has to be bytes")


class Latin1TextSpec(Spec[str]):
    """A zero terminated Latin-1 string, independent of the frame encoding"""

    def __init__(self, name: str, default: str=""):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes) -> tuple[str, bytes]:
        if b'\x00' in data:
            data, ret = data.split(b'\x00', 1)
        else:
            ret = b''
        return data.decode('latin1'), ret

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: str) -> bytes:
        try:
            return value.encode('latin1') + b'\x00'
        except UnicodeEncodeError as e:
            raise SpecError(e) from e

    @override
    def size(self, frame: Frame, value: str) -> int:
        return len(value) + 1

    @override
    def validate(self, frame: Frame, value: str | object | None) -> str:
        return str(value)


class EncodedTextSpec(Spec[str]):
    """A string in the frame encoding followed by a terminator"""

    def __init__(self, name: str, default: str=""):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        raw, data = read_terminated(data, frame.encoding)
        return decode_text(raw, frame.encoding), data

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: str):
        try:
            return encode_text(value, frame.encoding) + \
                frame.encoding.terminator
        except error as e:
            raise SpecError(e) from e

    @override
    def size(self, frame: Frame, value: str) -> int:
        return encoded_size(value, frame.encoding) + \
            len(frame.encoding.terminator)

    @override
    def validate(self, frame: Frame, value: str | object | None):
        return str(value)


class EncodedTrailingTextSpec(EncodedTextSpec):
    """A string in the frame encoding taking up the rest of the frame,
    written without terminator.
    """

    handle_nodata = True

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        return decode_text(data, frame.encoding), b''

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: str):
        try:
            return encode_text(value, frame.encoding)
        except error as e:
            raise SpecError(e) from e

    @override
    def size(self, frame: Frame, value: str) -> int:
        return encoded_size(value, frame.encoding)


class EncodedTextListSpec(Spec[list[str]]):
    """Strings in the frame encoding packed back to back.

    Values are separated by the terminator of the encoding, `terminated`
    adds one after the last value as well.
    """

    handle_nodata = True

    def __init__(self, name: str, terminated: bool=True,
                 default: list[str] | None=None):
        if default is None:
            default = []
        super().__init__(name, default)
        self.terminated = terminated

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        return decode_multi(data, frame.encoding), b''

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: list[str]):
        term = frame.encoding.terminator
        try:
            data = term.join(encode_text(v, frame.encoding) for v in value)
        except error as e:
            raise SpecError(e) from e
        if self.terminated:
            data += term
        return data

    @override
    def size(self, frame: Frame, value: list[str]) -> int:
        term_size = len(frame.encoding.terminator)
        size = sum(encoded_size(v, frame.encoding) for v in value)
        size += term_size * max(len(value) - 1, 0)
        if self.terminated:
            size += term_size
        return size

    @override
    def validate(self, frame: Frame, value: str | list[str] | object):
        if isinstance(value, str):
            return [value]
        if isinstance(value, list | tuple):
            return [str(v) for v in value]
        raise ValueError(f'Invalid text list: {value!r}')


class SynchronizedTextSpec(EncodedTextSpec):
    """Pairs of terminated text and a 4 byte big endian time stamp"""

    handle_nodata = True

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        texts: list[SynchronizedText] = []
        while data:
            raw, data = read_terminated(data, frame.encoding)
            value = decode_text(raw, frame.encoding)

            if len(data) < 4:
                raise SpecError("not enough data")
            time, = cast(tuple[int], struct.unpack(">I", data[:4]))

            texts.append(SynchronizedText(value, time))
            data = data[4:]
        return texts, b""

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: list[SynchronizedText]):
        data: list[bytes] = []
        term = frame.encoding.terminator
        for text, time in value:
            try:
                textb = encode_text(text, frame.encoding) + term
                data.append(textb + struct.pack(">I", time))
            except (error, struct.error) as e:
                raise SpecError(e) from e
        return b"".join(data)

    @override
    def size(self, frame: Frame, value: list[SynchronizedText]) -> int:
        term_size = len(frame.encoding.terminator)
        return sum(encoded_size(text, frame.encoding) + term_size + 4
                   for text, time in value)

    @override
    def validate(self, frame: Frame, value: list[tuple[str, int]]):
        return [SynchronizedText(str(text), int(time)) for text, time in value]


@final
class ID3FramesSpec(Spec[dict[str, "Frame"]]):
    """Frames embedded in a chapter, keyed by frame ID.

    Only the IDs in CHAPTER_SUB_FRAMES are kept, everything else in the
    embedded frame area is skipped.
    """

    handle_nodata = True

    def __init__(self, name: str, default: dict[str, Frame] | None=None):
        super().__init__(name, default or {})

    @override
    def read(self, header: ID3Header, frame: Frame, data: bytes):
        from ._frames import CHAPTER_SUB_FRAMES
        from ._tags import read_frames

        frames: dict[str, Frame] = {}
        wanted = set(CHAPTER_SUB_FRAMES)
        reader = BoundedReader.from_bytes(data)
        try:
            for frame_id, sub_frame in read_frames(
                    header, reader, wanted, CHAPTER_SUB_FRAMES):
                frames[frame_id] = sub_frame
        except ID3BodyOverflowError:
            # the chapter ends inside an embedded frame, keep what we have
            pass
        return frames, b''

    @override
    def write(self, config: ID3SaveConfig, frame: Frame, value: dict[str, Frame]):
        from ._frames import CHAPTER_SUB_FRAMES
        from ._tags import save_frame

        data: list[bytes] = []
        for frame_id in CHAPTER_SUB_FRAMES:
            sub_frame = value.get(frame_id)
            if sub_frame is not None:
                data.append(save_frame(config, frame_id, sub_frame))
        return b''.join(data)

    @override
    def size(self, frame: Frame, value: dict[str, Frame]) -> int:
        return sum(10 + sub_frame.size() for sub_frame in value.values())

    @override
    def validate(self, frame: Frame, value: dict[str, Frame] | None | object):
        from ._frames import CHAPTER_SUB_FRAMES

        if value is None:
            return {}
        if not isinstance(value, dict):
            raise TypeError(f"{self.name} has to be a dict")

        frames: dict[str, Frame] = {}
        for frame_id, sub_frame in value.items():
            kind = CHAPTER_SUB_FRAMES.get(frame_id)
            if kind is None:
                raise ValueError(f"{frame_id!r} can't be part of a chapter")
            if sub_frame is None:
                continue
            if not isinstance(sub_frame, kind):
                raise TypeError(f"{frame_id} has to be a {kind.__name__}")
            frames[frame_id] = sub_frame
        return frames
