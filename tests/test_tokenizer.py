# tests/test_tokenizer.py
# Run with: pytest tests/test_tokenizer.py

import unittest

from wikigrams.tokenizer import display_key, ngrams, page_ngrams, sections, tokens


class TestSections(unittest.TestCase):
    def test_splits_on_clause_punctuation(self):
        text = 'Hello, world. How are you? Fine; thanks "friend" (really) – bye'
        self.assertEqual(
            sections(text),
            ["Hello", "world", "How are you", "Fine", "thanks", "friend", "really", "bye"],
        )

    def test_splits_on_line_breaks_and_tabs(self):
        self.assertEqual(sections("one two\n\nthree\tfour\r\nfive"), ["one two", "three", "four", "five"])

    def test_empty_input(self):
        self.assertEqual(sections(""), [])
        self.assertEqual(sections(" , . ; "), [])


class TestTokens(unittest.TestCase):
    def test_lowercases_and_splits_on_whitespace(self):
        self.assertEqual(tokens("The  Cat sat"), ["the", "cat", "sat"])

    def test_blank_section(self):
        self.assertEqual(tokens("   "), [])


class TestNgrams(unittest.TestCase):
    def test_unigrams(self):
        self.assertEqual(list(ngrams(["a", "b"], 1)), ["a", "b"])

    def test_overlapping_windows(self):
        self.assertEqual(list(ngrams(["a", "b", "c"], 2)), ["a\tb", "b\tc"])

    def test_window_longer_than_section(self):
        self.assertEqual(list(ngrams(["a", "b"], 3)), [])

    def test_size_must_be_positive(self):
        with self.assertRaises(ValueError):
            list(ngrams(["a"], 0))

    def test_ngrams_do_not_cross_sections(self):
        self.assertEqual(
            list(page_ngrams("New York, city hall", 2)),
            ["new\tyork", "city\thall"],
        )

    def test_display_key(self):
        self.assertEqual(display_key("new\tyork\tcity"), "new york city")


if __name__ == "__main__":
    unittest.main()
