# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Static tables: frame descriptions and common ISO 639-2 codes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

IGNORED_OFFSET: Final = 0xFFFFFFFF
"""Chapter byte offset telling readers to use the time instead"""

ENGLISH: Final = "eng"
FRENCH: Final = "fra"
GERMAN: Final = "ger"
ITALIAN: Final = "ita"
JAPANESE: Final = "jpn"
PORTUGUESE: Final = "por"
RUSSIAN: Final = "rus"
SPANISH: Final = "spa"
CHINESE: Final = "zho"

_COMMON: Final = {
    "Album/Movie/Show title": "TALB",
    "Attached picture": "APIC",
    "Band/Orchestra/Accompaniment": "TPE2",
    "BPM": "TBPM",
    "Chapters": "CHAP",
    "Comments": "COMM",
    "Composer": "TCOM",
    "Conductor/performer refinement": "TPE3",
    "Content group description": "TIT1",
    "Content type": "TCON",
    "Copyright message": "TCOP",
    "Encoded by": "TENC",
    "File owner/licensee": "TOWN",
    "File type": "TFLT",
    "Initial key": "TKEY",
    "Internet radio station name": "TRSN",
    "Internet radio station owner": "TRSO",
    "Interpreted, remixed, or otherwise modified by": "TPE4",
    "ISRC": "TSRC",
    "Language": "TLAN",
    "Lead artist/Lead performer/Soloist/Performing group": "TPE1",
    "Length": "TLEN",
    "Lyricist/Text writer": "TEXT",
    "Media type": "TMED",
    "Original album/movie/show title": "TOAL",
    "Original artist/performer": "TOPE",
    "Original filename": "TOFN",
    "Original lyricist/text writer": "TOLY",
    "Part of a set": "TPOS",
    "Playlist delay": "TDLY",
    "Popularimeter": "POPM",
    "Publisher": "TPUB",
    "Software/Hardware and settings used for encoding": "TSSE",
    "Subtitle/Description refinement": "TIT3",
    "Synchronised lyrics/text": "SYLT",
    "Title/Songname/Content description": "TIT2",
    "Track number/Position in set": "TRCK",
    "Unique file identifier": "UFID",
    "Unsynchronised lyrics/text transcription": "USLT",
    "User defined text information frame": "TXXX",

    # shortcuts
    "Artist": "TPE1",
    "Genre": "TCON",
    "Title": "TIT2",
}

V23_COMMON_IDS: Final[Mapping[str, str]] = dict(_COMMON, **{
    "Date": "TDAT",
    "Original release year": "TORY",
    "Recording dates": "TRDA",
    "Size": "TSIZ",
    "Time": "TIME",
    "Year": "TYER",
})
"""Frame descriptions of ID3v2.3 mapped to frame IDs"""

V24_COMMON_IDS: Final[Mapping[str, str]] = dict(_COMMON, **{
    "Album sort order": "TSOA",
    "Encoding time": "TDEN",
    "Involved people list": "TIPL",
    "Mood": "TMOO",
    "Musician credits list": "TMCL",
    "Original release time": "TDOR",
    "Performer sort order": "TSOP",
    "Produced notice": "TPRO",
    "Recording time": "TDRC",
    "Release time": "TDRL",
    "Set subtitle": "TSST",
    "Tagging time": "TDTG",
    "Title sort order": "TSOT",

    # v2.3 frames replaced in v2.4
    "Date": "TDRC",
    "Original release year": "TDOR",
    "Recording dates": "TDRC",
    "Size": "",
    "Time": "TDRC",
    "Year": "TDRC",
})
"""Frame descriptions of ID3v2.4 mapped to frame IDs"""
