"""
Unit tests for core/text_utils.py
"""

import unittest

from kosmos_notifications.core.text_utils import (
    decode_entities,
    sanitize_text_field,
    strip_all_tags,
    trim_words,
)


class TestStripAllTags(unittest.TestCase):
    def test_removes_markup(self):
        self.assertEqual(strip_all_tags("<p>Hello <b>world</b></p>"), "Hello world")

    def test_decodes_entities_into_plain_text(self):
        self.assertEqual(strip_all_tags("<em>Fish &amp; Chips</em>"), "Fish & Chips")
        self.assertEqual(strip_all_tags("Fish &amp;amp; Chips"), "Fish &amp; Chips")

    def test_drops_script_and_style_contents(self):
        text = "<style>p{color:red}</style>Visible<script>alert(1)</script>"

        self.assertEqual(strip_all_tags(text), "Visible")

    def test_remove_breaks_collapses_whitespace(self):
        self.assertEqual(
            strip_all_tags("<p>one</p>\n\n<p>two\tthree</p>", remove_breaks=True),
            "one two three",
        )

    def test_empty_input(self):
        self.assertEqual(strip_all_tags(""), "")
        self.assertEqual(strip_all_tags(None), "")


class TestTrimWords(unittest.TestCase):
    def test_truncates_with_marker(self):
        text = " ".join(str(i) for i in range(10))

        self.assertEqual(trim_words(text, 3), "0 1 2...")

    def test_exact_length_not_marked(self):
        self.assertEqual(trim_words("a b c", 3), "a b c")

    def test_strips_markup_before_counting(self):
        self.assertEqual(
            trim_words("<p>alpha <a href='#'>beta</a></p>\n<p>gamma</p>", 2, "…"),
            "alpha beta…",
        )

    def test_normalizes_whitespace(self):
        self.assertEqual(trim_words("  a\n\nb\tc  ", 40), "a b c")


class TestSanitizeTextField(unittest.TestCase):
    def test_plain_slug_unchanged(self):
        self.assertEqual(sanitize_text_field("news"), "news")

    def test_strips_tags_and_line_breaks(self):
        self.assertEqual(sanitize_text_field("<b>news</b>\r\n  today "), "news today")

    def test_removes_percent_encoded_octets(self):
        self.assertEqual(sanitize_text_field("news%20%3C%3E"), "news")
        self.assertEqual(sanitize_text_field("ne%%4141ws"), "news")

    def test_none_becomes_empty(self):
        self.assertEqual(sanitize_text_field(None), "")


class TestDecodeEntities(unittest.TestCase):
    def test_named_and_numeric_entities(self):
        self.assertEqual(
            decode_entities("Rock &amp; Roll &#8211; &quot;Live&quot;"),
            'Rock & Roll – "Live"',
        )

    def test_none(self):
        self.assertEqual(decode_entities(None), "")


if __name__ == "__main__":
    unittest.main()
