import unittest
from datetime import date
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from calendar_bot.models import SourceEvent
from calendar_bot.services.normalization import normalize_event, parse_tags, parse_url_list
from calendar_bot.utils.text_cleaning import clean_url


class TestParseTags(unittest.TestCase):

    def test_empty_inputs(self):
        self.assertEqual(parse_tags(None), [])
        self.assertEqual(parse_tags(""), [])
        self.assertEqual(parse_tags("[]"), [])
        self.assertEqual(parse_tags([]), [])

    def test_json_array_string(self):
        self.assertEqual(parse_tags('["btc", "history"]'), ["btc", "history"])

    def test_structured_list(self):
        self.assertEqual(parse_tags(["btc", " mining ", ""]), ["btc", "mining"])

    def test_bare_string_kept_as_single_tag(self):
        self.assertEqual(parse_tags("satoshi"), ["satoshi"])

    def test_malformed_array_loses_wrapping(self):
        self.assertEqual(parse_tags('["btc", "history"'), ["btc", "history"])
        self.assertEqual(parse_tags("[btc, history]"), ["btc", "history"])

    def test_quoted_bare_string_loses_quotes(self):
        self.assertEqual(parse_tags("'satoshi'"), ["satoshi"])
        self.assertEqual(parse_tags("- halving"), ["halving"])

    def test_non_string_items_converted(self):
        self.assertEqual(parse_tags('[2009, "genesis"]'), ["2009", "genesis"])

    def test_never_returns_blank_entries(self):
        samples = ["", "[]", '["", "  ", "btc"]', "   ", ["", " "], '"  "', "x", "[ , ]", "- "]
        for raw in samples:
            with self.subTest(raw=raw):
                for tag in parse_tags(raw):
                    self.assertTrue(tag.strip())


class TestParseUrlList(unittest.TestCase):

    def test_single_bare_url(self):
        self.assertEqual(parse_url_list(" https://example.com/a.jpg "), ["https://example.com/a.jpg"])

    def test_wrapped_single_url(self):
        self.assertEqual(parse_url_list('["https://example.com/a.jpg"'), ["https://example.com/a.jpg"])

    def test_list_marker_removed(self):
        self.assertEqual(parse_url_list("- https://example.com/ref"), ["https://example.com/ref"])

    def test_json_array(self):
        raw = '["https://a.example/1.png", "- https://b.example/2", ""]'
        self.assertEqual(parse_url_list(raw), ["https://a.example/1.png", "https://b.example/2"])

    def test_empty_inputs(self):
        self.assertEqual(parse_url_list(None), [])
        self.assertEqual(parse_url_list(""), [])
        self.assertEqual(parse_url_list("[]"), [])

    def test_never_returns_blank_entries(self):
        for raw in ["", "[]", '[""]', "- ", '["  "]', ["", "- "]]:
            with self.subTest(raw=raw):
                self.assertEqual(parse_url_list(raw), [])

    def test_clean_url_is_deterministic(self):
        raw = '  ["https://example.com/x"]  '
        self.assertEqual(clean_url(raw), clean_url(raw))
        self.assertEqual(clean_url(raw), "https://example.com/x")


class TestNormalizeEvent(unittest.TestCase):

    def test_normalize_event_combines_fields(self):
        event = SourceEvent(
            id=7,
            date=date(2009, 1, 3),
            title="Genesis Block",
            description="Bitcoin launched",
            tags='["btc"]',
            media="https://example.com/genesis.jpg",
            references='["https://example.com/ref1", "https://example.com/ref2"]',
            hashtags=("#Satoshi",),
        )
        fields = normalize_event(event)
        self.assertEqual(fields.tags, ["btc", "Satoshi"])
        self.assertEqual(fields.media, ["https://example.com/genesis.jpg"])
        self.assertEqual(fields.references, ["https://example.com/ref1", "https://example.com/ref2"])


if __name__ == '__main__':
    unittest.main()
