# Copyright 2005 Michael Urman
# Copyright 2016 Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import struct
import warnings
from collections.abc import Iterable, Iterator, Mapping
from typing import IO, Final, override

from ._constants import V23_COMMON_IDS, V24_COMMON_IDS
from ._encoding import Encoding
from ._frames import (
    ChapterFrame,
    CommentFrame,
    Frame,
    PictureFrame,
    SynchronisedLyricsFrame,
    TextFrame,
    UFIDFrame,
    UnsynchronisedLyricsFrame,
    UserDefinedTextFrame,
    parse_frame_body,
)
from ._util import (
    BoundedReader,
    ID3BlankFrameError,
    ID3BodyOverflowError,
    ID3JunkFrameError,
    ID3NoHeaderError,
    ID3SaveConfig,
    ID3SizeFormatError,
    ID3UnsupportedVersionError,
    ID3Warning,
    decode_size,
    encode_size,
    error,
)

# Non-text frame IDs which can only appear once in a tag
_SINGULAR_FRAMES: Final = frozenset([
    "MCDI", "ETCO", "SYTC", "RVRB", "MLLT", "PCNT", "RBUF", "POSS", "OWNE",
    "SEEK", "ASPI",
    # v2.3 only
    "IPLS", "RVAD",
])


def must_frame_be_in_sequence(frame_id: str) -> bool:
    """Whether a tag can hold more than one frame with this ID"""

    if frame_id != "TXXX" and frame_id.startswith("T"):
        return False
    return frame_id not in _SINGULAR_FRAMES


class ID3Header:

    _V24: Final = 4
    _V23: Final = 3

    version: int = _V24
    revision: int = 0
    flags: int = 0
    size: int = 0
    """Size of the frame area, the 10 header bytes not included"""

    def __init__(self, fileobj: IO[bytes] | None = None):
        """Raises ID3NoHeaderError, ID3UnsupportedVersionError or
        ID3SizeFormatError"""

        if fileobj is None:
            # for testing
            return

        fn = getattr(fileobj, "name", "<unknown>")
        data = fileobj.read(10)
        if len(data) != 10:
            raise ID3NoHeaderError(f"{fn}: too small")

        id3, vmaj, vrev, flags, size = struct.unpack('>3sBBB4s', data)
        if id3 != b'ID3':
            raise ID3NoHeaderError(f"{fn!r} doesn't start with an ID3 tag")

        if vmaj not in (self._V23, self._V24):
            raise ID3UnsupportedVersionError(
                "%r ID3v2.%d not supported" % (fn, vmaj))

        self.version = vmaj
        self.revision = vrev
        self.flags = flags
        self.size = decode_size(size, synchsafe=True)

    @property
    def synchsafe(self) -> bool:
        """Whether frame sizes use 7 bits per byte"""

        return self.version == self._V24


class Sequence:
    """Frames sharing one frame ID, unique by their HashKey.

    Adding a frame with a HashKey already present replaces the old frame
    at its position.
    """

    def __init__(self) -> None:
        self._frames: list[Frame] = []

    def add(self, frame: Frame) -> None:
        key = frame.HashKey
        for i, other in enumerate(self._frames):
            if other.HashKey == key:
                self._frames[i] = frame
                return
        self._frames.append(frame)

    def count(self) -> int:
        return len(self._frames)

    def frames(self) -> list[Frame]:
        return list(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)


def read_frame_header(fileobj: IO[bytes] | BoundedReader,
                      synchsafe: bool) -> tuple[str, int]:
    """Read a 10 byte frame header.

    Returns:
        (frame_id, body_size)
    Raises:
        EOFError: if the stream ends before a complete header
        ID3BlankFrameError: for padding, a zero ID or zero size
        ID3SizeFormatError: for an invalid synch-safe size
    """

    data = fileobj.read(10)
    if len(data) < 10:
        raise EOFError("frame header cut short")

    frame_id, size = data[:4], data[4:8]
    size = decode_size(size, synchsafe)
    if frame_id == b"\x00" * 4 or size == 0:
        raise ID3BlankFrameError("blank frame")

    return frame_id.decode("latin1"), size


def read_frames(header: ID3Header, reader: BoundedReader,
                wanted: set[str] | None = None,
                known_frames: Mapping[str, type[Frame]] | None = None,
                ) -> Iterator[tuple[str, Frame]]:
    """Yields (frame_id, frame) for every frame in the frame area.

    Frames with an ID not in `wanted` are skipped, the set is checked
    again for each frame so the caller can shrink it while iterating.
    Reading stops at padding, at the end of the data or at an invalid
    frame size.

    Raises:
        ID3BodyOverflowError: if a frame is larger than what is left
        ID3InvalidLanguageLengthError
    """

    while reader.remaining > 0:
        try:
            frame_id, size = read_frame_header(reader, header.synchsafe)
        except (EOFError, ID3BlankFrameError):
            break
        except ID3SizeFormatError as e:
            warnings.warn(f"stopped reading frames: {e}", ID3Warning)
            break

        if size > reader.remaining:
            raise ID3BodyOverflowError(
                "%s frame of %d bytes exceeds the tag (%d bytes left)" % (
                    frame_id, size, reader.remaining))

        if wanted is not None and frame_id not in wanted:
            reader.skip(size)
            continue

        data = reader.read(size)
        try:
            frame = parse_frame_body(frame_id, data, header, known_frames)
        except ID3JunkFrameError as e:
            warnings.warn(f"skipped invalid {frame_id} frame: {e}",
                          ID3Warning)
            continue

        yield frame_id, frame


def save_frame(config: ID3SaveConfig, frame_id: str, frame: Frame) -> bytes:
    """Serialize a frame including its header"""

    data = frame._writeData(config)
    try:
        raw_id = frame_id.encode("ascii")
    except UnicodeEncodeError:
        raise error(f"invalid frame ID {frame_id!r}") from None
    if len(raw_id) != 4:
        raise error(f"invalid frame ID {frame_id!r}")

    size = encode_size(len(data), synchsafe=config.v2_version == 4)
    return struct.pack('>4s4sH', raw_id, size, 0) + data


class ID3Tags:
    """The frames of a tag.

    Frames are stored under their frame ID. IDs that can only appear
    once hold a single frame, adding another one replaces it. All other
    IDs hold a `Sequence`.
    """

    _version: int = 4
    _default_encoding: Encoding = Encoding.UTF8

    def __init__(self, version: int = 4) -> None:
        self._frames: dict[str, Frame] = {}
        self._sequences: dict[str, Sequence] = {}
        self.set_version(version)

    @property
    def version(self) -> int:
        """Major version of the tag, 3 or 4"""

        return self._version

    def set_version(self, version: int) -> None:
        """Set the major version used when writing the tag.

        Also resets the default encoding, Latin-1 for 3 and UTF-8 for 4.
        """

        if version not in (3, 4):
            raise ValueError("Only 3 and 4 possible for version")

        self._version = version
        if version == 3:
            self._default_encoding = Encoding.LATIN1
        else:
            self._default_encoding = Encoding.UTF8

    @property
    def default_encoding(self) -> Encoding:
        """Encoding used by add_text_frame() and suggested for new frames"""

        return self._default_encoding

    @default_encoding.setter
    def default_encoding(self, value: Encoding) -> None:
        self._default_encoding = Encoding(value)

    def common_id(self, description: str) -> str:
        """Returns the frame ID for a description like 'Title', or the
        description itself if unknown.
        """

        ids = V23_COMMON_IDS if self._version == 3 else V24_COMMON_IDS
        return ids.get(description, description)

    def add_frame(self, frame_id: str, frame: Frame) -> None:
        """Add a frame under the given frame ID"""

        if not isinstance(frame, Frame):
            raise TypeError(f"{frame!r} is not a Frame")

        if must_frame_be_in_sequence(frame_id):
            sequence = self._sequences.get(frame_id)
            if sequence is None:
                sequence = self._sequences[frame_id] = Sequence()
            sequence.add(frame)
        else:
            self._frames[frame_id] = frame

    def add_text_frame(self, frame_id: str, encoding: Encoding, text: str) -> None:
        self.add_frame(frame_id, TextFrame(encoding=encoding, text=text))

    def add_attached_picture(self, frame: PictureFrame) -> None:
        self.add_frame(self.common_id("Attached picture"), frame)

    def add_chapter_frame(self, frame: ChapterFrame) -> None:
        self.add_frame(self.common_id("Chapters"), frame)

    def add_comment_frame(self, frame: CommentFrame) -> None:
        self.add_frame(self.common_id("Comments"), frame)

    def add_unsynchronised_lyrics_frame(self, frame: UnsynchronisedLyricsFrame) -> None:
        self.add_frame(
            self.common_id("Unsynchronised lyrics/text transcription"), frame)

    def add_synchronised_lyrics_frame(self, frame: SynchronisedLyricsFrame) -> None:
        self.add_frame(self.common_id("Synchronised lyrics/text"), frame)

    def add_user_defined_text_frame(self, frame: UserDefinedTextFrame) -> None:
        self.add_frame(
            self.common_id("User defined text information frame"), frame)

    def add_ufid_frame(self, frame: UFIDFrame) -> None:
        self.add_frame(self.common_id("Unique file identifier"), frame)

    def get_frames(self, frame_id: str) -> list[Frame]:
        """All frames stored under the frame ID, oldest first"""

        frame = self._frames.get(frame_id)
        if frame is not None:
            return [frame]
        sequence = self._sequences.get(frame_id)
        if sequence is not None:
            return sequence.frames()
        return []

    def get_last_frame(self, frame_id: str) -> Frame | None:
        """The most recently added frame for the frame ID or None"""

        frames = self.get_frames(frame_id)
        if not frames:
            return None
        return frames[-1]

    def get_text_frame(self, frame_id: str) -> TextFrame:
        """The text frame for the frame ID, an empty one if missing"""

        frame = self.get_last_frame(frame_id)
        if not isinstance(frame, TextFrame):
            return TextFrame(encoding=self._default_encoding, text=[])
        return frame

    def delete_frames(self, frame_id: str) -> None:
        self._frames.pop(frame_id, None)
        self._sequences.pop(frame_id, None)

    def delete_all(self) -> None:
        self._frames.clear()
        self._sequences.clear()

    def count(self) -> int:
        """Number of frames"""

        return len(self._frames) + sum(
            sequence.count() for sequence in self._sequences.values())

    def has_frames(self) -> bool:
        return self.count() > 0

    def all_frames(self) -> dict[str, list[Frame]]:
        """Returns a new dict mapping frame IDs to lists of frames"""

        frames: dict[str, list[Frame]] = {}
        for frame_id, frame in self.iter_frames():
            frames.setdefault(frame_id, []).append(frame)
        return frames

    def iter_frames(self) -> Iterator[tuple[str, Frame]]:
        """Yields (frame_id, frame) in write order"""

        yield from self._frames.items()
        for frame_id, sequence in self._sequences.items():
            for frame in sequence:
                yield frame_id, frame

    def encoded_size(self) -> int:
        """Size of the tag when written, including the header.

        0 if there are no frames, such a tag is not written at all.
        """

        if not self.has_frames():
            return 0
        return 10 + sum(10 + frame.size() for _, frame in self.iter_frames())

    def pprint(self) -> str:
        """
        Returns:
            text: tags in a human-readable format, one frame per line.
        """

        return "\n".join(f"{frame_id}={frame._pprint()}"
                         for frame_id, frame in self.iter_frames())

    @override
    def __repr__(self) -> str:
        return "<%s version=%d frames=%d>" % (
            type(self).__name__, self._version, self.count())

    def _read(self, header: ID3Header, fileobj: IO[bytes],
              parse_frames: Iterable[str] = ()) -> None:
        wanted = {self.common_id(d) for d in parse_frames} or None
        reader = BoundedReader(fileobj, header.size)
        for frame_id, frame in read_frames(header, reader, wanted):
            self.add_frame(frame_id, frame)
            if wanted is not None and not must_frame_be_in_sequence(frame_id):
                wanted.discard(frame_id)
                if not wanted:
                    break

    def _write(self, config: ID3SaveConfig) -> bytes:
        return b"".join(save_frame(config, frame_id, frame)
                        for frame_id, frame in self.iter_frames())
