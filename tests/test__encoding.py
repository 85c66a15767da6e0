
from hypothesis import given, strategies as st

from id3v2tag._encoding import Encoding, get_encoding, decode_text, \
    encode_text, encoded_size, decode_multi, read_terminated, \
    iter_text_fixups
from id3v2tag._util import error

from tests import TestCase


latin1_text = st.text(st.characters(min_codepoint=1, max_codepoint=255))
unicode_text = st.text(st.characters(
    exclude_categories=("Cs",), exclude_characters="\x00"))


class TEncoding(TestCase):

    def test_terminator(self):
        self.assertEqual(Encoding.LATIN1.terminator, b"\x00")
        self.assertEqual(Encoding.UTF16.terminator, b"\x00\x00")
        self.assertEqual(Encoding.UTF16BE.terminator, b"\x00\x00")
        self.assertEqual(Encoding.UTF8.terminator, b"\x00")

    def test_get_encoding(self):
        self.assertIs(get_encoding(0), Encoding.LATIN1)
        self.assertIs(get_encoding(2), Encoding.UTF16BE)

    def test_unknown_key_is_utf8(self):
        self.assertIs(get_encoding(4), Encoding.UTF8)
        self.assertIs(get_encoding(255), Encoding.UTF8)

    def test_pprint(self):
        self.assertEqual(Encoding.UTF16BE._pprint(), "utf16be")


class TEncodeText(TestCase):

    def test_utf16_bom(self):
        self.assertEqual(encode_text("a", Encoding.UTF16), b"\xff\xfea\x00")
        self.assertEqual(encode_text("", Encoding.UTF16), b"\xff\xfe")

    def test_utf16be(self):
        self.assertEqual(encode_text("a", Encoding.UTF16BE), b"\x00a")

    def test_no_terminator(self):
        self.assertEqual(encode_text("abc", Encoding.LATIN1), b"abc")
        self.assertEqual(encode_text("abc", Encoding.UTF8), b"abc")

    def test_unrepresentable(self):
        self.assertRaises(error, encode_text, "€", Encoding.LATIN1)

    def test_lone_surrogate(self):
        for enc in (Encoding.UTF16, Encoding.UTF16BE, Encoding.UTF8):
            self.assertRaises(error, encode_text, "\ud800", enc)

    @given(unicode_text, st.sampled_from(
        [Encoding.UTF16, Encoding.UTF16BE, Encoding.UTF8]))
    def test_encoded_size(self, text, encoding):
        self.assertEqual(encoded_size(text, encoding),
                         len(encode_text(text, encoding)))

    @given(latin1_text)
    def test_encoded_size_latin1(self, text):
        self.assertEqual(encoded_size(text, Encoding.LATIN1),
                         len(encode_text(text, Encoding.LATIN1)))


class TDecodeText(TestCase):

    @given(latin1_text)
    def test_roundtrip_latin1(self, text):
        data = encode_text(text, Encoding.LATIN1)
        self.assertEqual(decode_text(data, Encoding.LATIN1), text)

    @given(unicode_text, st.sampled_from(
        [Encoding.UTF16, Encoding.UTF16BE, Encoding.UTF8]))
    def test_roundtrip(self, text, encoding):
        data = encode_text(text, encoding)
        self.assertEqual(decode_text(data, encoding), text)

    def test_strips_terminator(self):
        self.assertEqual(decode_text(b"abc\x00", Encoding.LATIN1), "abc")
        self.assertEqual(
            decode_text(b"\xff\xfea\x00\x00\x00", Encoding.UTF16), "a")

    def test_bare_bom(self):
        self.assertEqual(decode_text(b"\xff\xfe", Encoding.UTF16), "")
        self.assertEqual(
            decode_text(b"\xff\xfe\x00\x00", Encoding.UTF16), "")

    def test_utf16_big_endian_bom(self):
        self.assertEqual(decode_text(b"\xfe\xff\x00a", Encoding.UTF16), "a")

    def test_utf16_no_bom_is_big_endian(self):
        self.assertEqual(decode_text(b"\x00a\x00b", Encoding.UTF16), "ab")

    def test_odd_length_utf16(self):
        self.assertEqual(decode_text(b"\xff\xfea\x00b", Encoding.UTF16), "ab")

    def test_latin1_fallback(self):
        self.assertEqual(decode_text(b"a\xffb", Encoding.UTF8), "a\xffb")
        self.assertEqual(
            decode_text(b"\xff\xfe\x00\xd8", Encoding.UTF16),
            "\xff\xfe\x00\xd8")

    def test_empty(self):
        for encoding in Encoding:
            self.assertEqual(decode_text(b"", encoding), "")

    def test_fixups(self):
        self.assertEqual(
            list(iter_text_fixups(b"abc", Encoding.UTF16)),
            [b"abc", b"abc\x00"])
        self.assertEqual(
            list(iter_text_fixups(b"abc", Encoding.UTF8)), [b"abc"])
        self.assertEqual(
            list(iter_text_fixups(b"ab", Encoding.UTF16BE)), [b"ab"])


class TReadTerminated(TestCase):

    def test_latin1(self):
        self.assertEqual(
            read_terminated(b"abc\x00def", Encoding.LATIN1), (b"abc", b"def"))

    def test_no_terminator(self):
        self.assertEqual(
            read_terminated(b"abc", Encoding.UTF8), (b"abc", b""))

    def test_utf16_aligned(self):
        # the high byte of Ā and the low byte of \u0001 form 00 00
        data = b"\x01\x00\x00\x01\x00\x00rest"
        self.assertEqual(
            read_terminated(data, Encoding.UTF16BE),
            (b"\x01\x00\x00\x01", b"rest"))

    def test_utf16_le_after_ascii(self):
        data = b"\xff\xfea\x00\x00\x00xy"
        self.assertEqual(
            read_terminated(data, Encoding.UTF16),
            (b"\xff\xfea\x00", b"xy"))


class TDecodeMulti(TestCase):

    def test_latin1(self):
        self.assertEqual(
            decode_multi(b"a\x00b\x00", Encoding.LATIN1), ["a", "b"])
        self.assertEqual(
            decode_multi(b"a\x00b", Encoding.LATIN1), ["a", "b"])

    def test_single(self):
        self.assertEqual(decode_multi(b"abc", Encoding.UTF8), ["abc"])
        self.assertEqual(decode_multi(b"abc\x00", Encoding.UTF8), ["abc"])

    def test_empty_values(self):
        self.assertEqual(
            decode_multi(b"a\x00\x00b", Encoding.UTF8), ["a", "", "b"])

    def test_utf16(self):
        data = b"\xff\xfea\x00\x00\x00\xff\xfeb\x00\x00\x00"
        self.assertEqual(decode_multi(data, Encoding.UTF16), ["a", "b"])

    def test_utf16be_aligned(self):
        data = b"\x01\x00\x00\x01\x00\x00\x00b"
        self.assertEqual(
            decode_multi(data, Encoding.UTF16BE), ["Ā\u0001", "b"])

    @given(st.lists(unicode_text.filter(bool), min_size=1),
           st.sampled_from(list(Encoding)))
    def test_join_split(self, values, encoding):
        if encoding == Encoding.LATIN1:
            values = [v.encode("latin1", "replace").decode("latin1")
                      for v in values]
        data = encoding.terminator.join(
            encode_text(v, encoding) for v in values)
        self.assertEqual(decode_multi(data, encoding), values)
