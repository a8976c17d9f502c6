# tests/test_markup.py
# Run with: pytest tests/test_markup.py

import time
import unittest

from wikigrams.markup import (
    is_disambiguation_title,
    is_redirect,
    is_special_title,
    normalize,
)

SAMPLES = [
    "",
    "Plain text only.",
    "'''Alan Turing''' was a [[mathematics|mathematician]].<ref>Bio</ref>",
    "{{Infobox person|name={{nowrap|Alan}}}}\nLead paragraph.",
    "==History==\nEarly life.\n===Childhood===\n* born in [[London]]\n* schooled",
    "{| class=\"wikitable\"\n|-\n| a || b\n|}\nAfter the table.",
    "See [http://example.com the site] or [http://example.org].",
    "a (b (c) d) e",
    "[[File:Lincoln.jpg|thumb|A photo of [[Abraham Lincoln]].]]Lincoln was tall.",
    "Broken [[link and {{template and <b unclosed",
    "''''' ''' '' = == === [[ ]] {{ }}",
    "Body\n== References ==\n{{reflist}}\n==See also==\n* [[Other]]",
    "{{As of|2010}}, the town had 500 people.",
]


class TestNormalizeRules(unittest.TestCase):
    def test_empty_and_whitespace(self):
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize("   \n\t  "), "")

    def test_internal_link_with_label(self):
        text = normalize("[[Dog|dogs]] bark")
        self.assertIn("dogs bark", text)
        self.assertNotIn("Dog|dogs", text)

    def test_internal_link_without_label(self):
        self.assertEqual(normalize("A [[Dog]] barks."), "A Dog barks.")

    def test_category_link_removed(self):
        self.assertEqual(normalize("Dogs bark.[[Category:Animals]]"), "Dogs bark.")

    def test_file_link_with_nested_link_removed(self):
        text = normalize(
            "[[File:Lincoln.jpg|thumb|A photo of [[Abraham Lincoln]].]]Lincoln was tall."
        )
        self.assertEqual(text, "Lincoln was tall.")

    def test_namespace_match_ignores_case(self):
        self.assertEqual(normalize("Text[[image:x.png|caption]]"), "Text")

    def test_nested_templates_resolve_to_empty(self):
        self.assertEqual(normalize("{{{{nested}}}}"), "")
        self.assertEqual(normalize("{{Infobox|a={{b|{{c}}}}}}Body"), "Body")

    def test_link_template_keeps_target(self):
        self.assertEqual(normalize("The {{l|en|cat}} sat."), "The cat sat.")
        self.assertEqual(normalize("{{l|fr|chien|gloss=dog}}"), "chien")

    def test_references_removed(self):
        text = normalize('Fact.<ref>Smith 2001</ref> More<ref name="a" />.')
        self.assertEqual(text, "Fact. More.")

    def test_table_removed(self):
        text = normalize('{| class="wikitable"\n|-\n| a || b\n|}\nAfter the table.')
        self.assertEqual(text, "After the table.")

    def test_external_links(self):
        text = normalize("See [http://example.com the site] or [http://example.org].")
        self.assertEqual(text, "See the site or .")
        self.assertEqual(normalize('[http://foo.com "click here"]'), "click here")

    def test_comments_and_tags_removed(self):
        self.assertEqual(normalize("a<!-- hidden -->b"), "ab")
        self.assertEqual(normalize("<b>bold</b> and <br/>text"), "bold and text")

    def test_headings_collapse_to_text(self):
        self.assertEqual(normalize("==History==\nText"), "History\n\nText")
        self.assertEqual(normalize("=== Early life ===\nText"), "Early life\n\nText")

    def test_text_formatting_removed(self):
        self.assertEqual(normalize("'''Bold''' and ''italic''"), "Bold and italic")

    def test_list_and_quote_markers_removed(self):
        self.assertEqual(normalize("* one\n* two\n: quote"), "one\n\ntwo\n\nquote")

    def test_as_of_template(self):
        self.assertEqual(
            normalize("{{As of|2010}}, the town had 500 people."),
            "as of 2010, the town had 500 people.",
        )

    def test_paragraphs_joined_by_blank_lines(self):
        self.assertEqual(normalize("  first  \r\n\n\n  second\rthird "), "first\n\nsecond\n\nthird")


class TestTrailingSections(unittest.TestCase):
    def test_truncates_at_see_also(self):
        self.assertEqual(normalize("Intro\n==See also==\n* [[Other]]"), "Intro")

    def test_truncates_at_earliest_heading(self):
        text = "Body\n== References ==\n{{reflist}}\n==See also==\n* x"
        self.assertEqual(normalize(text), "Body")

    def test_truncation_ignores_case(self):
        self.assertEqual(normalize("Body\n==EXTERNAL LINKS==\n[http://x y]"), "Body")

    def test_deeper_heading_cut_at_first_marker(self):
        self.assertEqual(normalize("Body\n===Further reading===\nbook"), "Body")

    def test_plain_words_do_not_truncate(self):
        self.assertEqual(normalize("See also the references."), "See also the references.")


class TestParentheticals(unittest.TestCase):
    def test_nested_parentheticals_removed(self):
        self.assertEqual(normalize("a (b (c) d) e", remove_parentheticals=True), "a e")

    def test_parentheticals_kept_by_default(self):
        self.assertEqual(normalize("a (b (c) d) e"), "a (b (c) d) e")

    def test_unbalanced_parenthesis_left_alone(self):
        self.assertEqual(normalize("a (b c", remove_parentheticals=True), "a (b c")


class TestNormalizeProperties(unittest.TestCase):
    def test_idempotent(self):
        for remove in (False, True):
            for sample in SAMPLES:
                with self.subTest(sample=sample, remove=remove):
                    once = normalize(sample, remove)
                    self.assertEqual(normalize(once, remove), once)

    def test_malformed_markup_never_raises(self):
        text = normalize("Broken [[link and {{template and <b unclosed")
        self.assertIsInstance(text, str)
        self.assertIn("Broken", text)

    def test_long_adversarial_input_terminates(self):
        text = "{{" * 200 + "x" + "}}" * 200 + "[[" * 100 + "y" + "]]" * 100
        self.assertEqual(normalize(text), "y")

    def test_long_marker_runs_stay_fast(self):
        quotes = "x " + "'" * 20_000 + " y"
        equals = "x " + "=" * 20_000 + " y"

        for remove in (False, True):
            with self.subTest(remove=remove):
                start = time.perf_counter()
                self.assertEqual(normalize(quotes, remove), "x y")
                self.assertEqual(normalize(equals, remove), equals)
                self.assertEqual(normalize("=" * 20_000, remove), "=" * 20_000)
                self.assertLess(time.perf_counter() - start, 5.0)


class TestPagePredicates(unittest.TestCase):
    def test_redirect(self):
        self.assertTrue(is_redirect("#REDIRECT [[Foo]]"))
        self.assertTrue(is_redirect("#redirect [[Foo]]"))
        self.assertFalse(is_redirect("Text mentioning #REDIRECT"))

    def test_special_title(self):
        self.assertTrue(is_special_title("Category:Dogs"))
        self.assertTrue(is_special_title("wikipedia:About"))
        self.assertFalse(is_special_title("Star Wars: A New Hope"))
        self.assertFalse(is_special_title("Dogs"))

    def test_disambiguation_title(self):
        self.assertTrue(is_disambiguation_title("Mercury (disambiguation)"))
        self.assertFalse(is_disambiguation_title("Mercury (planet)"))


if __name__ == "__main__":
    unittest.main()
