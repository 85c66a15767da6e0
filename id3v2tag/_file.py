# Copyright (C) 2005  Michael Urman
#               2006  Lukas Lalinsky
#               2013  Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import os
import shutil
import stat
import struct
import tempfile
from collections.abc import Iterable
from typing import IO, Final

from ._filething import FileLike, open_filething
from ._tags import ID3Header, ID3Tags
from ._util import (
    ID3NoFileError,
    ID3NoHeaderError,
    ID3SaveConfig,
    ParseOptions,
    encode_size,
)

_COPY_BUFFER_SIZE: Final = 128 * 1024


class ID3(ID3Tags):
    """ID3(filething=None, parse=True, parse_frames=())

    An ID3v2.3/2.4 tag at the start of a file.

    If any arguments are given, the :meth:`load` is called with them. If no
    arguments are given then an empty version 4 `ID3` object is created.

    ::

        ID3("foo.mp3")
        # same as
        t = ID3()
        t.load("foo.mp3")

    Arguments:
        filething (filething): a path, a binary file object or `None`

    Attributes:
        filename (str): the file the tag was loaded from, or `None`
        size (int): the total size of the ID3 tag in the file, including
            the header, 0 if the file has no tag
    """

    filename: str | None = None
    _fileobj: IO[bytes] | None = None
    _owned: bool = False
    _size: int = 0

    def __init__(self, filething: FileLike | None = None, **kwargs: object):
        super().__init__()
        if filething is not None:
            self.load(filething, **kwargs)

    @property
    def size(self) -> int:
        return self._size

    def load(self, filething: FileLike, parse: bool = True,
             parse_frames: Iterable[str] = ()) -> None:
        """Load tags from a filename or file object.

        Args:
            filething (filething): filename or file object to load tag
                data from
            parse (bool): if False only the tag header is read
            parse_frames (List[str]): frame IDs or descriptions
                (e.g. 'Title') to load, all frames if empty

        Raises:
            ID3UnsupportedVersionError
            ID3SizeFormatError
            ID3BodyOverflowError
            ID3InvalidLanguageLengthError

        A file without ID3 tag results in an empty version 4 tag.
        The file stays open until :meth:`close` is called, saving needs
        the audio data after the tag.
        """

        self.reset(filething, ParseOptions(parse, tuple(parse_frames)))

    def reset(self, filething: FileLike,
              options: ParseOptions = ParseOptions()) -> None:
        """Drop all frames and parse the tag of another file"""

        thing = open_filething(filething)
        try:
            self._parse(thing.fileobj, options)
        except BaseException:
            if thing.owned:
                thing.fileobj.close()
            raise

        self._release()
        self.filename = thing.filename
        self._fileobj = thing.fileobj
        self._owned = thing.owned

    def _init(self, size: int, version: int) -> None:
        self.delete_all()
        self._size = size
        self.set_version(version)

    def _parse(self, fileobj: IO[bytes], options: ParseOptions) -> None:
        try:
            header = ID3Header(fileobj)
        except ID3NoHeaderError:
            self._init(0, 4)
            return

        self._init(10 + header.size, header.version)
        if not options.parse:
            return

        self._read(header, fileobj, options.parse_frames)

    def write_to(self, fileobj: IO[bytes]) -> int:
        """Write the tag, nothing if there are no frames.

        Returns:
            int: the number of bytes written
        Raises:
            error: if a frame can't be written
            ID3SizeOverflowError: if the tag is too large
        """

        config = ID3SaveConfig(self.version)
        framedata = self._write(config)
        if not framedata:
            return 0

        header = struct.pack(
            '>3sBBB4s', b'ID3', self.version, 0, 0, encode_size(len(framedata)))
        fileobj.write(header)
        fileobj.write(framedata)
        return len(header) + len(framedata)

    def save(self) -> None:
        """Save changes to the file the tag was loaded from.

        The tag and the audio data following the old tag are written to
        a temporary file next to the original, which then replaces the
        original. A tag without frames removes the tag from the file.

        A file object passed in by the caller is left open, afterwards it
        still refers to the replaced file and the tag reads from a new
        handle of its own.

        Raises:
            ID3NoFileError: if the tag wasn't loaded from a file
            error: if a frame can't be written
            OSError
        """

        if self.filename is None or self._fileobj is None:
            raise ID3NoFileError("tag is not backed by a file")

        filename = self.filename
        original = self._fileobj
        mode = stat.S_IMODE(os.fstat(original.fileno()).st_mode)

        fd, temp = tempfile.mkstemp(
            prefix=os.path.basename(filename) + ".",
            suffix="-id3v2",
            dir=os.path.dirname(os.path.abspath(filename)))
        replaced = False
        try:
            with os.fdopen(fd, "wb") as h:
                written = self.write_to(h)
                original.seek(self._size)
                shutil.copyfileobj(original, h, _COPY_BUFFER_SIZE)
                h.flush()
                os.fsync(h.fileno())
            os.chmod(temp, mode)
            if self._owned:
                original.close()
            os.replace(temp, filename)
            replaced = True
        except BaseException:
            try:
                os.unlink(temp)
            except OSError:
                pass
            raise
        finally:
            if replaced or original.closed:
                self._fileobj = open(filename, "rb")
                self._owned = True

        self._size = written

    def close(self) -> None:
        """Release the file the tag was loaded from.

        Raises:
            ID3NoFileError: if the tag wasn't loaded from a file
        """

        if self.filename is None or self._fileobj is None:
            raise ID3NoFileError("tag is not backed by a file")
        self._release()

    def _release(self) -> None:
        if self._fileobj is not None and self._owned:
            self._fileobj.close()
        self._fileobj = None
        self._owned = False


Open = ID3
