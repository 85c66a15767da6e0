
import os
import stat
import warnings
from io import BytesIO

from id3v2tag import ID3, Open, Encoding, TextFrame, CommentFrame, \
    PictureFrame, PictureType, ChapterFrame, UnknownFrame, \
    SynchronisedLyricsFrame, ID3NoFileError, ID3UnsupportedVersionError, \
    ID3BodyOverflowError, ID3InvalidLanguageLengthError, ID3Warning, error
from id3v2tag._util import encode_size

from tests import TestCase, get_temp_file, get_temp_empty


warnings.simplefilter('error', ID3Warning)

AUDIO = b"\xff\xfb\x90\x64" + bytes(range(256)) * 8


def frame_bytes(frame_id, body, synchsafe=True):
    return (frame_id + encode_size(len(body), synchsafe) + b"\x00\x00" +
            body)


def tag_bytes(frames, version=4, padding=0):
    area = b"".join(frames) + b"\x00" * padding
    return (b"ID3" + bytes((version, 0, 0)) + encode_size(len(area)) +
            area)


class TID3Load(TestCase):

    def test_no_tag(self):
        tag = ID3(BytesIO(AUDIO))
        self.assertEqual(tag.version, 4)
        self.assertEqual(tag.size, 0)
        self.assertFalse(tag.has_frames())
        self.assertIsNone(tag.filename)

    def test_empty_source(self):
        tag = ID3(BytesIO(b""))
        self.assertEqual(tag.version, 4)
        self.assertEqual(tag.count(), 0)

    def test_empty(self):
        tag = ID3()
        self.assertEqual(tag.version, 4)
        self.assertEqual(tag.size, 0)
        self.assertEqual(tag.count(), 0)

    def test_unsupported(self):
        data = b"ID3\x02\x00\x00\x00\x00\x00\x00" + AUDIO
        self.assertRaises(ID3UnsupportedVersionError, ID3, BytesIO(data))

    def test_future_version(self):
        data = b"ID3\x05\x00\x00\x00\x00\x00\x00" + AUDIO
        self.assertRaises(ID3UnsupportedVersionError, ID3, BytesIO(data))
        self.assertRaises(error, ID3, BytesIO(data))

    def test_v24(self):
        data = tag_bytes([
            frame_bytes(b"TIT2", b"\x03Title"),
            frame_bytes(b"TPE1", b"\x03A\x00B\x00"),
            frame_bytes(b"COMM", b"\x00engdesc\x00text"),
        ], padding=100) + AUDIO
        tag = ID3(BytesIO(data))
        self.assertEqual(tag.version, 4)
        self.assertEqual(tag.size, len(data) - len(AUDIO))
        self.assertEqual(tag.get_text_frame("TIT2").text, ["Title"])
        self.assertEqual(tag.get_text_frame("TPE1").text, ["A", "B"])
        comment = tag.get_last_frame("COMM")
        self.assertEqual((comment.lang, comment.desc, comment.text),
                         ("eng", "desc", "text"))
        self.assertEqual(tag.count(), 3)

    def test_v23(self):
        body = b"\x00" + b"x" * 300
        data = tag_bytes(
            [frame_bytes(b"TALB", body, synchsafe=False)], version=3) + AUDIO
        tag = ID3(BytesIO(data))
        self.assertEqual(tag.version, 3)
        self.assertIs(tag.default_encoding, Encoding.LATIN1)
        self.assertEqual(tag.get_text_frame("TALB").text, ["x" * 300])

    def test_parse_false(self):
        data = tag_bytes([frame_bytes(b"TIT2", b"\x03Title")]) + AUDIO
        tag = ID3(BytesIO(data), parse=False)
        self.assertEqual(tag.count(), 0)
        self.assertEqual(tag.size, 10 + 16)

    def test_parse_frames(self):
        data = tag_bytes([
            frame_bytes(b"TIT2", b"\x03Title"),
            frame_bytes(b"TPE1", b"\x03Artist"),
            frame_bytes(b"APIC", b"\x00image/png\x00\x03\x00png"),
        ]) + AUDIO
        tag = ID3(BytesIO(data), parse_frames=["Artist", "APIC"])
        self.assertEqual(sorted(tag.all_frames()), ["APIC", "TPE1"])
        self.assertIs(tag.get_last_frame("APIC").type,
                      PictureType.COVER_FRONT)

    def test_body_overflow(self):
        area = frame_bytes(b"TIT2", b"\x03Title")
        data = (b"ID3\x04\x00\x00" + encode_size(len(area) - 2) + area +
                AUDIO)
        self.assertRaises(ID3BodyOverflowError, ID3, BytesIO(data))

    def test_truncated_file(self):
        area = frame_bytes(b"TIT2", b"\x03Title")
        data = b"ID3\x04\x00\x00" + encode_size(100) + area[:-2]
        tag = ID3(BytesIO(data))
        self.assertEqual(tag.get_text_frame("TIT2").text, ["Tit"])

    def test_invalid_language(self):
        data = tag_bytes([frame_bytes(b"COMM", b"\x00en")]) + AUDIO
        self.assertRaises(
            ID3InvalidLanguageLengthError, ID3, BytesIO(data))

    def test_junk_frame(self):
        data = tag_bytes([
            frame_bytes(b"CHAP", b"ch\x00\x01"),
            frame_bytes(b"TIT2", b"\x03Title"),
        ]) + AUDIO
        with self.assertWarns(ID3Warning):
            tag = ID3(BytesIO(data))
        self.assertEqual(tag.get_frames("CHAP"), [])
        self.assertEqual(tag.get_text_frame("TIT2").text, ["Title"])

    def test_unknown_frames(self):
        data = tag_bytes([
            frame_bytes(b"PRIV", b"a\x00one"),
            frame_bytes(b"PRIV", b"a\x00one"),
            frame_bytes(b"WOAR", b"http://x"),
        ]) + AUDIO
        tag = ID3(BytesIO(data))
        self.assertEqual(len(tag.get_frames("PRIV")), 2)
        self.assertIsInstance(tag.get_last_frame("WOAR"), UnknownFrame)

    def test_chapter(self):
        chap = ChapterFrame(
            element_id="ch0", start_time=0, end_time=5000,
            title=TextFrame(encoding=Encoding.UTF8, text="Intro"))
        data = tag_bytes([frame_bytes(b"CHAP", chap._writeData())]) + AUDIO
        tag = ID3(BytesIO(data))
        new = tag.get_last_frame("CHAP")
        self.assertEqual(new.title.text, ["Intro"])
        self.assertIsNone(new.artwork)

    def test_reset(self):
        tag = ID3(BytesIO(tag_bytes([frame_bytes(b"TIT2", b"\x03a")])))
        tag.reset(BytesIO(tag_bytes(
            [frame_bytes(b"TALB", b"\x00b", synchsafe=False)], version=3)))
        self.assertEqual(tag.version, 3)
        self.assertEqual(tag.get_frames("TIT2"), [])
        self.assertEqual(tag.get_text_frame("TALB").text, ["b"])

    def test_reset_keeps_state_on_error(self):
        tag = ID3(BytesIO(tag_bytes([frame_bytes(b"TIT2", b"\x03a")])))
        self.assertRaises(
            ID3UnsupportedVersionError, tag.reset,
            BytesIO(b"ID3\x02\x00\x00\x00\x00\x00\x00"))

    def test_pprint(self):
        data = tag_bytes([frame_bytes(b"TIT2", b"\x03Title")])
        self.assertEqual(ID3(BytesIO(data)).pprint(), "TIT2=Title")


class TID3Write(TestCase):

    def roundtrip(self, tag):
        fileobj = BytesIO()
        written = tag.write_to(fileobj)
        self.assertEqual(written, len(fileobj.getvalue()))
        self.assertEqual(written, tag.encoded_size())
        fileobj.seek(0)
        return ID3(fileobj)

    def test_empty(self):
        fileobj = BytesIO()
        self.assertEqual(ID3().write_to(fileobj), 0)
        self.assertEqual(fileobj.getvalue(), b"")

    def test_header(self):
        tag = ID3()
        tag.add_text_frame("TIT2", Encoding.LATIN1, "a")
        fileobj = BytesIO()
        tag.write_to(fileobj)
        self.assertEqual(
            fileobj.getvalue(),
            b"ID3\x04\x00\x00\x00\x00\x00\x0d"
            b"TIT2\x00\x00\x00\x03\x00\x00\x00a\x00")

    def test_v24_roundtrip(self):
        tag = ID3()
        tag.add_text_frame("TIT2", Encoding.UTF8, ["a", "b"])
        tag.add_comment_frame(CommentFrame(
            encoding=Encoding.UTF16, lang="eng", desc="d", text="ü"))
        tag.add_attached_picture(PictureFrame(
            encoding=Encoding.LATIN1, mime="image/jpeg", desc="c",
            data=b"\xff" * 300))
        tag.add_synchronised_lyrics_frame(SynchronisedLyricsFrame(
            lang="eng", text=[("x", 1)]))
        tag.add_chapter_frame(ChapterFrame(
            element_id="c1", end_time=10,
            description=TextFrame(text="long")))
        tag.add_frame("PRIV", UnknownFrame(data=b"raw"))

        new = self.roundtrip(tag)
        self.assertEqual(new.version, 4)
        self.assertEqual(new.all_frames(), tag.all_frames())

    def test_v23_roundtrip(self):
        tag = ID3()
        tag.set_version(3)
        tag.add_text_frame("TIT2", tag.default_encoding, "x" * 500)
        tag.add_chapter_frame(ChapterFrame(
            element_id="c1", title=TextFrame(
                encoding=Encoding.LATIN1, text="y" * 200)))

        new = self.roundtrip(tag)
        self.assertEqual(new.version, 3)
        self.assertEqual(new.all_frames(), tag.all_frames())

    def test_frame_write_error(self):
        tag = ID3()
        tag.add_frame("COMM", CommentFrame(lang="en"))
        self.assertRaises(
            ID3InvalidLanguageLengthError, tag.write_to, BytesIO())


class TID3File(TestCase):

    def setUp(self):
        data = tag_bytes(
            [frame_bytes(b"TIT2", b"\x03Title")], padding=50) + AUDIO
        self.filename = get_temp_file(data)
        self.tag = None

    def tearDown(self):
        if self.tag is not None and self.tag._fileobj is not None:
            self.tag.close()
        os.unlink(self.filename)

    def read(self):
        with open(self.filename, "rb") as h:
            return h.read()

    def test_filename(self):
        self.tag = Open(self.filename)
        self.assertEqual(self.tag.filename, self.filename)
        self.assertEqual(self.tag.size, 10 + 16 + 50)

    def test_open_file_object(self):
        with open(self.filename, "rb") as h:
            tag = ID3(h)
            self.assertEqual(tag.filename, self.filename)
            tag.close()
            self.assertFalse(h.closed)

    def test_save_file_object(self):
        with open(self.filename, "rb") as h:
            tag = ID3(h)
            tag.add_text_frame("TALB", Encoding.UTF8, "Album")
            tag.save()
            self.assertFalse(h.closed)
            self.assertIsNot(tag._fileobj, h)
            self.assertEqual(tag.get_text_frame("TIT2").text, ["Title"])
            tag.close()
            self.assertFalse(h.closed)
        data = self.read()
        self.assertTrue(data.endswith(AUDIO))
        new = ID3(self.filename)
        try:
            self.assertEqual(new.get_text_frame("TALB").text, ["Album"])
        finally:
            new.close()

    def test_save(self):
        self.tag = ID3(self.filename)
        self.tag.add_text_frame("TALB", Encoding.UTF8, "Album")
        self.tag.save()

        data = self.read()
        self.assertTrue(data.endswith(AUDIO))
        self.assertEqual(self.tag.size, len(data) - len(AUDIO))

        new = ID3(self.filename)
        try:
            self.assertEqual(new.get_text_frame("TALB").text, ["Album"])
            self.assertEqual(new.get_text_frame("TIT2").text, ["Title"])
        finally:
            new.close()

    def test_save_twice(self):
        self.tag = ID3(self.filename)
        self.tag.add_text_frame("TALB", Encoding.UTF8, "x" * 1000)
        self.tag.save()
        self.tag.delete_frames("TALB")
        self.tag.save()
        data = self.read()
        self.assertTrue(data.endswith(AUDIO))
        self.assertEqual(len(data), self.tag.size + len(AUDIO))

    def test_save_empty(self):
        self.tag = ID3(self.filename)
        self.tag.delete_all()
        self.tag.save()
        self.assertEqual(self.read(), AUDIO)
        self.assertEqual(self.tag.size, 0)

    def test_save_no_tag(self):
        filename = get_temp_file(AUDIO)
        try:
            tag = ID3(filename)
            tag.save()
            tag.close()
            with open(filename, "rb") as h:
                self.assertEqual(h.read(), AUDIO)
        finally:
            os.unlink(filename)

    def test_save_keeps_mode(self):
        os.chmod(self.filename, 0o640)
        self.tag = ID3(self.filename)
        self.tag.save()
        mode = stat.S_IMODE(os.stat(self.filename).st_mode)
        self.assertEqual(mode, 0o640)

    def test_save_error_keeps_file(self):
        before = self.read()
        self.tag = ID3(self.filename)
        self.tag.add_frame("COMM", CommentFrame(lang="toolong"))
        self.assertRaises(ID3InvalidLanguageLengthError, self.tag.save)
        self.assertEqual(self.read(), before)
        directory = os.path.dirname(self.filename)
        prefix = os.path.basename(self.filename) + "."
        self.assertEqual(
            [n for n in os.listdir(directory) if n.startswith(prefix)], [])

    def test_close(self):
        self.tag = ID3(self.filename)
        self.tag.close()
        self.assertRaises(ID3NoFileError, self.tag.close)
        self.assertRaises(ID3NoFileError, self.tag.save)


class TID3NoFile(TestCase):

    def test_save(self):
        tag = ID3(BytesIO(AUDIO))
        self.assertRaises(ID3NoFileError, tag.save)
        self.assertRaises(ID3NoFileError, ID3().save)

    def test_close(self):
        self.assertRaises(ID3NoFileError, ID3(BytesIO(AUDIO)).close)

    def test_missing_file(self):
        filename = get_temp_empty(".mp3")
        os.unlink(filename)
        self.assertRaises(OSError, ID3, filename)
