# Copyright (C) 2005  Michael Urman
#               2006  Lukas Lalinsky
#               2013  Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""ID3v2.3 and ID3v2.4 reading and writing.

This is based off of the following references:

* http://id3.org/id3v2.4.0-structure
* http://id3.org/id3v2.4.0-frames
* http://id3.org/id3v2.3.0

Frames are stored in the tag under their frame ID. Each frame kind is
implemented as one class (e.g. every text frame is a :class:`TextFrame`),
frame IDs without a dedicated class are kept as :class:`UnknownFrame` and
written back unchanged.

::

    tag = id3v2tag.Open("song.mp3")
    tag.add_text_frame("TIT2", tag.default_encoding, "Title")
    tag.save()
    tag.close()
"""

version = (1, 0, 0)
"""Version tuple."""

version_string = ".".join(map(str, version))
"""Version string."""

from ._constants import IGNORED_OFFSET as IGNORED_OFFSET, \
    V23_COMMON_IDS as V23_COMMON_IDS, V24_COMMON_IDS as V24_COMMON_IDS, \
    ENGLISH as ENGLISH, FRENCH as FRENCH, GERMAN as GERMAN, \
    ITALIAN as ITALIAN, JAPANESE as JAPANESE, PORTUGUESE as PORTUGUESE, \
    RUSSIAN as RUSSIAN, SPANISH as SPANISH, CHINESE as CHINESE
from ._encoding import Encoding as Encoding
from ._file import ID3 as ID3, Open as Open
from ._frames import Frames as Frames, Frame as Frame, \
    TextFrame as TextFrame, UserDefinedTextFrame as UserDefinedTextFrame, \
    CommentFrame as CommentFrame, PictureFrame as PictureFrame, \
    PopularimeterFrame as PopularimeterFrame, UFIDFrame as UFIDFrame, \
    LinkFrame as LinkFrame, \
    SynchronisedLyricsFrame as SynchronisedLyricsFrame, \
    UnsynchronisedLyricsFrame as UnsynchronisedLyricsFrame, \
    ChapterFrame as ChapterFrame, UnknownFrame as UnknownFrame
from ._specs import PictureType as PictureType, \
    TimestampFormat as TimestampFormat, ContentType as ContentType, \
    SynchronizedText as SynchronizedText
from ._tags import ID3Tags as ID3Tags, ID3Header as ID3Header
from ._util import error as error, ID3NoHeaderError as ID3NoHeaderError, \
    ID3UnsupportedVersionError as ID3UnsupportedVersionError, \
    ID3SizeFormatError as ID3SizeFormatError, \
    ID3SizeOverflowError as ID3SizeOverflowError, \
    ID3BodyOverflowError as ID3BodyOverflowError, \
    ID3BlankFrameError as ID3BlankFrameError, \
    ID3JunkFrameError as ID3JunkFrameError, \
    ID3InvalidLanguageLengthError as ID3InvalidLanguageLengthError, \
    ID3NoFileError as ID3NoFileError, ID3Warning as ID3Warning, \
    ID3SaveConfig as ID3SaveConfig, ParseOptions as ParseOptions
