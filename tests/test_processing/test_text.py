"""
Tests for string decoding and timestamp helpers.
"""

from datetime import datetime, timezone

from processors.facebook.text import (
    decode_fb_string,
    epoch_to_datetime,
    parse_html_date,
    parse_iso_datetime,
    to_iso,
)
from tests.fixtures.generators import fb_encode


class TestDecodeFbString:
    """Tests for undoing Facebook's Latin-1 escaped UTF-8."""

    def test_decodes_mojibake(self):
        assert decode_fb_string(fb_encode("Café")) == "Café"

    def test_decodes_emoji(self):
        assert decode_fb_string(fb_encode("Party 🎉")) == "Party 🎉"

    def test_plain_ascii_unchanged(self):
        assert decode_fb_string("Summer Trip") == "Summer Trip"

    def test_already_decoded_text_returned_as_is(self):
        """Characters outside Latin-1 cannot be re-encoded and pass through."""
        assert decode_fb_string("日本") == "日本"

    def test_empty_values(self):
        assert decode_fb_string("") == ""
        assert decode_fb_string(None) is None

    def test_non_string_values_returned_unchanged(self):
        assert decode_fb_string(123) == 123
        assert decode_fb_string(["a"]) == ["a"]


class TestTimestamps:
    """Tests for timestamp parsing."""

    def test_epoch_to_utc(self):
        assert epoch_to_datetime(1609459200) == datetime(2021, 1, 1, tzinfo=timezone.utc)

    def test_epoch_string(self):
        assert epoch_to_datetime("1609459200") == datetime(2021, 1, 1, tzinfo=timezone.utc)

    def test_missing_epoch(self):
        assert epoch_to_datetime(None) is None
        assert epoch_to_datetime(0) is None
        assert epoch_to_datetime("") is None
        assert epoch_to_datetime("soon") is None

    def test_html_date_with_seconds(self):
        parsed = parse_html_date("Jan 01, 2021 12:00:00 PM")
        assert parsed == datetime(2021, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_html_date_without_seconds(self):
        parsed = parse_html_date("Feb 3, 2020 4:05 am")
        assert parsed == datetime(2020, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_html_date_iso(self):
        parsed = parse_html_date("2021-01-01T12:00:00Z")
        assert parsed == datetime(2021, 1, 1, 12, tzinfo=timezone.utc)

    def test_html_date_unrecognised(self):
        assert parse_html_date("yesterday") is None
        assert parse_html_date("") is None

    def test_graph_api_offset_without_colon(self):
        parsed = parse_iso_datetime("2021-01-01T12:00:00+0000")
        assert parsed == datetime(2021, 1, 1, 12, tzinfo=timezone.utc)

    def test_iso_offset_normalised_to_utc(self):
        parsed = parse_iso_datetime("2021-01-01T14:00:00+02:00")
        assert parsed == datetime(2021, 1, 1, 12, tzinfo=timezone.utc)

    def test_to_iso_uses_z_suffix(self):
        assert to_iso(datetime(2021, 1, 1, tzinfo=timezone.utc)) == "2021-01-01T00:00:00Z"
        assert to_iso(None) is None
