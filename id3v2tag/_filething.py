# Copyright 2016 Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import os
from typing import IO, NamedTuple


class FileThing(NamedTuple):
    """
    filename is None if the source is not a file on disk, a tag read from
    such a source can't be saved.
    owned is True if the file object was opened here and has to be closed
    here as well.
    """
    fileobj: IO[bytes]
    filename: str | None
    owned: bool


type FileLike = str | os.PathLike[str] | IO[bytes]


def open_filething(filething: FileLike) -> FileThing:
    """Returns a FileThing for a path or a binary file object.

    A file object backed by a regular file (e.g. the result of
    ``open(path, "rb")``) keeps its path as filename.
    """

    if isinstance(filething, str | os.PathLike):
        filename = os.fspath(filething)
        return FileThing(open(filename, "rb"), filename, True)

    name = getattr(filething, "name", None)
    if isinstance(name, str) and os.path.isfile(name):
        return FileThing(filething, name, False)
    return FileThing(filething, None, False)
