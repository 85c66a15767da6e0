# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from typing import IO, TYPE_CHECKING, Any, Final, override

from ._constants import IGNORED_OFFSET
from ._encoding import Encoding
from ._specs import (
    BinaryDataSpec,
    ByteSpec,
    ContentType,
    EncodedTextListSpec,
    EncodedTextSpec,
    EncodedTrailingTextSpec,
    EncodingSpec,
    ID3FramesSpec,
    IntegerSpec,
    Latin1TextSpec,
    PictureType,
    PictureTypeSpec,
    SizedIntegerSpec,
    Spec,
    SpecError,
    StringSpec,
    SynchronizedText,
    SynchronizedTextSpec,
    TimestampFormat,
)
from ._util import ID3JunkFrameError, ID3SaveConfig, error

if TYPE_CHECKING:
    from ._tags import ID3Header


class Frame:
    """Fundamental unit of ID3 data.

    ID3 tags are split into frames. Each frame has a potentially
    different structure, described by its list of specs. The frame ID
    is not part of the frame, the tag stores frames under their ID, so
    one frame class serves many IDs (e.g. all text frames).
    """

    _framespec: Sequence[Spec[Any]] = []

    def __init__(self, *args: object, **kwargs: object):
        for checker, val in zip(self._framespec, args, strict=False):
            setattr(self, checker.name, val)
        for checker in self._framespec[len(args):]:
            setattr(self, checker.name,
                    kwargs.get(checker.name, checker.default))

    @override
    def __setattr__(self, name: str, value):
        for checker in self._framespec:
            if checker.name == name:
                self._setattr(name, checker.validate(self, value))
                return
        super().__setattr__(name, value)

    def _setattr(self, name: str, value):
        self.__dict__[name] = value

    @property
    def HashKey(self) -> str:
        """A key used to ensure frame uniqueness in a sequence of frames
        sharing one ID.
        """

        return "ID"

    def size(self) -> int:
        """Size of the frame body in bytes, the frame header not included"""

        return sum(spec.size(self, getattr(self, spec.name))
                   for spec in self._framespec)

    def write_to(self, fileobj: IO[bytes], config: ID3SaveConfig | None = None) -> int:
        """Write the frame body.

        Returns:
            int: the number of bytes written
        Raises:
            error
        """

        data = self._writeData(config)
        fileobj.write(data)
        return len(data)

    @override
    def __eq__(self, other: object):
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, spec.name) == getattr(other, spec.name)
                   for spec in self._framespec)

    @override
    def __repr__(self) -> str:
        """Python representation of a frame.

        The string returned is a valid Python expression to construct
        a copy of this frame.
        """
        kw: list[str] = []
        for attr in self._framespec:
            # so repr works during __init__
            if hasattr(self, attr.name):
                kw.append(f'{attr.name}={getattr(self, attr.name)!r}')
        return '{}({})'.format(type(self).__name__, ', '.join(kw))

    def _readData(self, id3: ID3Header, data: bytes) -> bytes:
        """Raises ID3JunkFrameError; Returns leftover data"""

        for reader in self._framespec:
            if len(data) or reader.handle_nodata:
                try:
                    value, data = reader.read(id3, self, data)
                except SpecError as e:
                    raise ID3JunkFrameError(e) from e
            else:
                raise ID3JunkFrameError("no data left")
            self._setattr(reader.name, value)

        return data

    def _writeData(self, config: ID3SaveConfig | None = None) -> bytes:
        """Raises error"""

        if config is None:
            config = ID3SaveConfig()

        data: list[bytes] = []
        for writer in self._framespec:
            try:
                data.append(
                    writer.write(config, self, getattr(self, writer.name)))
            except SpecError as e:
                raise error(e) from e

        return b''.join(data)

    def pprint(self) -> str:
        """Return a human-readable representation of the frame."""
        return f"{type(self).__name__}={self._pprint()}"

    def _pprint(self) -> str:
        return "[unrepresentable data]"

    @classmethod
    def _fromData(cls, header: ID3Header, data: bytes):
        """Construct this frame from a raw frame body.

        Raises:

        ID3JunkFrameError in case parsing failed
        ID3InvalidLanguageLengthError in case a language code is cut short
        """

        frame = cls()
        frame._readData(header, data)
        return frame

    @override
    def __hash__(self: object):
        raise TypeError("Frame objects are unhashable")


class TextFrame(Frame):
    """Text strings.

    Used for every frame ID starting with 'T' except TXXX. Text frames
    support casts to str, as well as list-like indexing and iteration.

    Text frames have a 'text' attribute which is the list of strings,
    and an 'encoding' attribute; 0 for ISO-8859 1, 1 UTF-16, 2 for
    UTF-16BE, and 3 for UTF-8.
    """

    encoding: Encoding = Encoding.UTF16
    text: list[str] = []

    _framespec = [
        EncodingSpec('encoding', default=Encoding.UTF16),
        EncodedTextListSpec('text', terminated=True),
    ]

    @override
    def __str__(self):
        return '\u0000'.join(self.text)

    __hash__: Final = Frame.__hash__

    def __getitem__(self, item: int):
        return self.text[item]

    def __iter__(self):
        return iter(self.text)

    @override
    def _pprint(self):
        return " / ".join(self.text)


class UserDefinedTextFrame(Frame):
    """User-defined text data (TXXX).

    Has a 'desc' attribute which is set to any value (though the encoding
    of the text and the description must be the same). Many taggers use
    this frame to store freeform keys.
    """

    encoding: Encoding = Encoding.UTF16
    desc: str = ""
    text: list[str] = []

    _framespec = [
        EncodingSpec('encoding'),
        EncodedTextSpec('desc'),
        EncodedTextListSpec('text', terminated=False),
    ]

    @property
    @override
    def HashKey(self) -> str:
        return self.desc

    @property
    def value(self) -> str:
        """The first value, or an empty string"""

        return self.text[0] if self.text else ""

    __hash__: Final = Frame.__hash__

    @override
    def _pprint(self):
        return "{}={}".format(self.desc, " / ".join(self.text))


class CommentFrame(Frame):
    """User comment (COMM).

    Comments have a three letter ISO 639-2 language code in 'lang', a
    description in 'desc' and the comment itself in 'text'.
    """

    encoding: Encoding = Encoding.UTF16
    lang: str = "XXX"
    desc: str = ""
    text: str = ""

    _framespec = [
        EncodingSpec('encoding'),
        StringSpec('lang', length=3),
        EncodedTextSpec('desc'),
        EncodedTrailingTextSpec('text'),
    ]

    @property
    @override
    def HashKey(self):
        return self.lang + self.desc

    @override
    def __str__(self):
        return self.text

    __hash__: Final = Frame.__hash__

    @override
    def _pprint(self):
        return f"{self.desc}={self.lang}={self.text}"


class PictureFrame(Frame):
    """Attached Picture (APIC).

    Attributes:

    * encoding -- text encoding for the description
    * mime -- a MIME type (e.g. image/jpeg) or '-->' if the data is a URI
    * type -- the source of the image (3 is the album front cover)
    * desc -- a text description of the image
    * data -- raw image data, as a byte string
    """

    encoding: Encoding = Encoding.UTF16
    mime: str = ""
    type: PictureType = PictureType.COVER_FRONT
    desc: str = ""
    data: bytes = b""

    _framespec = [
        EncodingSpec('encoding'),
        Latin1TextSpec('mime'),
        PictureTypeSpec('type'),
        EncodedTextSpec('desc'),
        BinaryDataSpec('data'),
    ]

    @property
    @override
    def HashKey(self):
        return "%02X%s" % (self.type, self.desc)

    __hash__: Final = Frame.__hash__

    @override
    def _pprint(self):
        type_desc = str(self.type)
        if hasattr(self.type, "_pprint"):
            type_desc = self.type._pprint()

        return "{} ({}, {} bytes)".format(
            self.desc, type_desc, len(self.data))


class PopularimeterFrame(Frame):
    """Popularimeter (POPM).

    This frame keys a rating (out of 255) and a play count to an email
    address.

    Attributes:

    * email -- email this POPM frame is for
    * rating -- rating from 0 to 255
    * count -- number of times the files has been played
    """

    email: str = ""
    rating: int = 0
    count: int = 0

    _framespec = [
        Latin1TextSpec('email'),
        ByteSpec('rating', default=0),
        IntegerSpec('count', default=0),
    ]

    @property
    @override
    def HashKey(self):
        return self.email

    __hash__: Final = Frame.__hash__

    @override
    def _pprint(self):
        return f"{self.email}={self.count!r} {self.rating!r}/255"


class UFIDFrame(Frame):
    """Unique file identifier (UFID).

    Attributes:

    * owner -- format/type of identifier
    * identifier -- identifier
    """

    owner: str = ""
    identifier: bytes = b""

    _framespec = [
        Latin1TextSpec('owner'),
        BinaryDataSpec('identifier'),
    ]

    @property
    @override
    def HashKey(self):
        return self.owner

    __hash__: Final = Frame.__hash__

    @override
    def _pprint(self):
        return f"{self.owner}={self.identifier!r}"


class LinkFrame(Frame):
    """A URL, as embedded in chapters (WXXX)."""

    encoding: Encoding = Encoding.UTF16
    url: str = ""

    _framespec = [
        EncodingSpec('encoding'),
        EncodedTextSpec('url'),
    ]

    @override
    def __str__(self):
        return self.url

    __hash__: Final = Frame.__hash__

    @override
    def _pprint(self):
        return self.url


class UnsynchronisedLyricsFrame(Frame):
    """Unsynchronised lyrics/text transcription (USLT).

    Lyrics have a three letter ISO language code ('lang'), a
    description ('desc'), and a block of plain text ('text').
    """

    encoding: Encoding = Encoding.UTF16
    lang: str = "XXX"
    desc: str = ""
    text: str = ""

    _framespec = [
        EncodingSpec('encoding', default=Encoding.UTF16),
        StringSpec('lang', length=3),
        EncodedTextSpec('desc'),
        EncodedTrailingTextSpec('text'),
    ]

    @property
    @override
    def HashKey(self):
        return self.lang + self.desc

    @override
    def __str__(self):
        return self.text

    __hash__: Final = Frame.__hash__

    @override
    def _pprint(self):
        return f"{self.desc}={self.lang}={self.text}"


class SynchronisedLyricsFrame(Frame):
    """Synchronised lyrics/text (SYLT).

    'text' is a list of `SynchronizedText` entries, their time stamps
    are in the unit given by 'format'.
    """

    encoding: Encoding = Encoding.UTF16
    lang: str = "XXX"
    format: int = TimestampFormat.MILLISECONDS
    type: int = ContentType.LYRICS
    desc: str = ""
    text: list[SynchronizedText] = []

    _framespec = [
        EncodingSpec('encoding'),
        StringSpec('lang', length=3),
        ByteSpec('format', default=TimestampFormat.MILLISECONDS),
        ByteSpec('type', default=ContentType.LYRICS),
        EncodedTextSpec('desc'),
        SynchronizedTextSpec('text', default=[]),
    ]

    @property
    @override
    def HashKey(self):
        return self.lang + self.desc

    __hash__: Final = Frame.__hash__

    @override
    def __str__(self):
        unit = 'fr' if self.format == TimestampFormat.MPEG_FRAMES else 'ms'
        return "\n".join(f"[{time}{unit}]: {text}"
                         for (text, time) in self.text)

    @override
    def _pprint(self):
        return str(self)


class ChapterFrame(Frame):
    """Chapter (CHAP).

    Start and end time are in milliseconds. The byte offsets are
    ignored by readers if set to IGNORED_OFFSET.

    A chapter can embed one title (TIT2), description (TIT3), link (WXXX)
    and artwork (APIC) frame each. They are available as attributes and
    are None if the chapter doesn't have them.
    """

    element_id: str = ""
    start_time: int = 0
    end_time: int = 0
    start_offset: int = IGNORED_OFFSET
    end_offset: int = IGNORED_OFFSET
    sub_frames: dict[str, Frame]

    _framespec = [
        Latin1TextSpec("element_id"),
        SizedIntegerSpec("start_time", 4, default=0),
        SizedIntegerSpec("end_time", 4, default=0),
        SizedIntegerSpec("start_offset", 4, default=IGNORED_OFFSET),
        SizedIntegerSpec("end_offset", 4, default=IGNORED_OFFSET),
        ID3FramesSpec("sub_frames"),
    ]

    def __init__(self, *args: object, title: TextFrame | None = None,
                 description: TextFrame | None = None,
                 link: LinkFrame | None = None,
                 artwork: PictureFrame | None = None, **kwargs: object):
        super().__init__(*args, **kwargs)
        for name, value in [("title", title), ("description", description),
                            ("link", link), ("artwork", artwork)]:
            if value is not None:
                setattr(self, name, value)

    def _get_sub_frame(self, frame_id: str):
        return self.sub_frames.get(frame_id)

    def _set_sub_frame(self, frame_id: str, value: Frame | None):
        frames = dict(self.sub_frames)
        frames[frame_id] = value
        self.sub_frames = frames

    @property
    def title(self) -> TextFrame | None:
        return self._get_sub_frame("TIT2")

    @title.setter
    def title(self, value: TextFrame | None):
        self._set_sub_frame("TIT2", value)

    @property
    def description(self) -> TextFrame | None:
        return self._get_sub_frame("TIT3")

    @description.setter
    def description(self, value: TextFrame | None):
        self._set_sub_frame("TIT3", value)

    @property
    def link(self) -> LinkFrame | None:
        return self._get_sub_frame("WXXX")

    @link.setter
    def link(self, value: LinkFrame | None):
        self._set_sub_frame("WXXX", value)

    @property
    def artwork(self) -> PictureFrame | None:
        return self._get_sub_frame("APIC")

    @artwork.setter
    def artwork(self, value: PictureFrame | None):
        self._set_sub_frame("APIC", value)

    @property
    @override
    def HashKey(self):
        return self.element_id

    __hash__: Final = Frame.__hash__

    @override
    def _pprint(self):
        frame_pprint = ""
        for frame_id, frame in self.sub_frames.items():
            frame_pprint += "\n" + " " * 4 + f"{frame_id}={frame._pprint()}"
        return "%s time=%d..%d offset=%d..%d%s" % (
            self.element_id, self.start_time, self.end_time,
            self.start_offset, self.end_offset, frame_pprint)


class UnknownFrame(Frame):
    """A frame without a dedicated class, the body is kept as is.

    Every instance has its own random HashKey so any number of them can
    be stored under one frame ID.
    """

    data: bytes = b""

    _framespec = [
        BinaryDataSpec('data'),
    ]

    def __init__(self, *args: object, **kwargs: object):
        super().__init__(*args, **kwargs)
        self._setattr("_key", uuid.uuid4().hex)

    @property
    @override
    def HashKey(self):
        return self.__dict__["_key"]

    __hash__: Final = Frame.__hash__

    @override
    def _pprint(self):
        return f"[{len(self.data)} bytes]"


Frames: Final[Mapping[str, type[Frame]]] = {
    "APIC": PictureFrame,
    "CHAP": ChapterFrame,
    "COMM": CommentFrame,
    "POPM": PopularimeterFrame,
    "SYLT": SynchronisedLyricsFrame,
    "TXXX": UserDefinedTextFrame,
    "UFID": UFIDFrame,
    "USLT": UnsynchronisedLyricsFrame,
}
"""All frame IDs with a dedicated frame class. Other IDs starting with
'T' are TextFrame, the rest UnknownFrame.
"""

CHAPTER_SUB_FRAMES: Final[Mapping[str, type[Frame]]] = {
    "TIT2": TextFrame,
    "TIT3": TextFrame,
    "WXXX": LinkFrame,
    "APIC": PictureFrame,
}
"""Frames a chapter can embed, in the order they get written"""


def get_frame_class(frame_id: str,
                    known_frames: Mapping[str, type[Frame]] | None = None) -> type[Frame]:
    """Returns the frame class used for a frame ID"""

    if known_frames is not None:
        return known_frames.get(frame_id, UnknownFrame)

    if frame_id != "TXXX" and frame_id.startswith("T"):
        return TextFrame
    return Frames.get(frame_id, UnknownFrame)


def parse_frame_body(frame_id: str, data: bytes, header: ID3Header,
                     known_frames: Mapping[str, type[Frame]] | None = None) -> Frame:
    """Parse a frame body.

    Raises:
        ID3JunkFrameError
        ID3InvalidLanguageLengthError
    """

    return get_frame_class(frame_id, known_frames)._fromData(header, data)
