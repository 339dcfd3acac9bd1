#!/usr/bin/env python3
"""
Unit tests for text_scanner.py.

Covers line comments, block comments, raw strings, escaped quotes and the
known limitations of the marker-counting approach.
"""

import sys
from pathlib import Path
from unittest import TestCase, main as unittest_main

# Add hooks to path
sys.path.insert(0, str(Path(__file__).parent.parent / "hooks"))

from text_scanner import is_code_position, is_in_comment_or_string


class TestLineComments(TestCase):

    def test_inside_line_comment(self):
        self.assertTrue(is_in_comment_or_string("// #[allow(dead_code)]", 3))

    def test_plain_code(self):
        self.assertFalse(is_in_comment_or_string("#[allow(dead_code)]", 0))

    def test_line_after_comment_is_code(self):
        content = "// comment\n#[allow(dead_code)]"
        self.assertFalse(is_in_comment_or_string(content, 11))

    def test_trailing_comment_on_same_line(self):
        content = "fn f() {} // #[allow(x)]"
        self.assertTrue(is_in_comment_or_string(content, content.index("#")))

    def test_code_before_comment_on_same_line(self):
        content = "#[allow(x)] // reason"
        self.assertTrue(is_code_position(content, 0))


class TestBlockComments(TestCase):

    def test_inside_block_comment(self):
        self.assertTrue(is_in_comment_or_string("/* #[allow(dead_code)] */", 3))

    def test_after_closed_block_comment(self):
        content = "/* note */ #[allow(x)]"
        self.assertTrue(is_code_position(content, content.index("#")))

    def test_multiline_block_comment(self):
        content = "/*\n * #[allow(x)]\n */"
        self.assertFalse(is_code_position(content, content.index("#")))


class TestStringLiterals(TestCase):

    def test_inside_string(self):
        content = 'let s = "#[allow(dead_code)]";'
        self.assertTrue(is_in_comment_or_string(content, 9))

    def test_after_closed_string(self):
        content = 'let s = "x"; #[allow(y)]'
        self.assertTrue(is_code_position(content, content.index("#")))

    def test_escaped_quote_does_not_close(self):
        content = 'let s = "a \\" #[allow(y)]'
        self.assertFalse(is_code_position(content, content.index("#")))

    def test_escaped_quote_then_real_close(self):
        content = 'let s = "a \\" b"; #[allow(y)]'
        self.assertTrue(is_code_position(content, content.index("#")))

    def test_unterminated_string_is_inside(self):
        content = 'let s = "never closed #[allow(y)]'
        self.assertTrue(is_in_comment_or_string(content, content.index("#")))


class TestRawStrings(TestCase):

    def test_inside_raw_string(self):
        content = 'let s = r"#[allow(x)]";'
        self.assertTrue(is_in_comment_or_string(content, content.index("#")))

    def test_inside_hashed_raw_string(self):
        content = 'let s = r#"#[allow(x)]"#;'
        self.assertTrue(is_in_comment_or_string(content, content.index("#[")))

    def test_after_raw_string(self):
        content = 'let s = r"abc"; #[allow(x)]'
        self.assertTrue(is_code_position(content, content.index("#")))


class TestDocumentedLimitations(TestCase):
    """Marker counting is not a lexer; these cases are accepted behaviour."""

    def test_block_opener_inside_string_counts(self):
        content = 'let s = "/*";\n#[allow(x)]'
        self.assertFalse(is_code_position(content, content.index("#")))

    def test_double_slash_inside_string_counts_as_comment(self):
        content = 'let url = "http://x"; #[allow(y)]'
        self.assertFalse(is_code_position(content, content.index("#")))


class TestPurity(TestCase):

    def test_repeated_calls_agree(self):
        content = 'let s = "x"; /* c */ #[allow(y)]'
        offset = content.index("#")
        self.assertEqual(is_code_position(content, offset), is_code_position(content, offset))

    def test_offset_zero(self):
        self.assertTrue(is_code_position("", 0))


if __name__ == "__main__":
    unittest_main()
