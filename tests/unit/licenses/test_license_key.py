"""
Unit tests for charset parsing and license key generation.
"""
import re
import string

import pytest

from core.domain.exceptions import InvalidCharsetRangeError, RandomSourceError
from licenses.domain.license_key import (
    DEFAULT_ALPHABET,
    generate_license_key,
    parse_charset,
)


class TestParseCharset:
    """Tests for parse_charset."""

    def test_empty_spec_returns_default_alphabet(self):
        """Test that an empty spec yields letters and digits."""
        alphabet = parse_charset("")
        assert alphabet == DEFAULT_ALPHABET
        assert set(alphabet) == set(string.ascii_letters + string.digits)

    @pytest.mark.parametrize(
        "spec,expected",
        [
            ("A-Z", string.ascii_uppercase),
            ("0-9", string.digits),
            ("a-f", "abcdef"),
            ("x-x", "x"),
        ],
    )
    def test_range_expands_inclusive_in_order(self, spec, expected):
        """Test that X-Y expands to every character from X to Y."""
        assert parse_charset(spec) == expected

    def test_tokens_concatenate_in_order(self):
        """Test ranges and literals concatenated in token order."""
        assert parse_charset("0-3,xyz,A-C") == "0123xyzABC"

    def test_duplicates_are_kept(self):
        """Test that overlapping tokens are not deduplicated."""
        assert parse_charset("a-c,b") == "abcb"

    def test_backwards_range_fails(self):
        """Test that X>Y raises InvalidCharsetRangeError."""
        with pytest.raises(InvalidCharsetRangeError):
            parse_charset("z-a")

    def test_backwards_range_fails_after_valid_tokens(self):
        """Test that one bad range fails the whole spec."""
        with pytest.raises(InvalidCharsetRangeError):
            parse_charset("A-Z,9-0")


class TestGenerateLicenseKey:
    """Tests for generate_license_key."""

    def test_prefixed_key_shape(self):
        """Test PREFIX-RANDOM format with the default alphabet."""
        key = generate_license_key("TEST", 12, "-")
        assert re.fullmatch(r"TEST-[A-Za-z0-9]{12}", key)

    def test_no_prefix_omits_separator(self):
        """Test that an empty prefix yields only the random part."""
        key = generate_license_key("", 16, "-")
        assert len(key) == 16
        assert "-" not in key

    def test_custom_separator(self):
        """Test a non-default separator."""
        key = generate_license_key("ACME", 8, "_", "ABC")
        assert re.fullmatch(r"ACME_[ABC]{8}", key)

    def test_empty_separator_uses_default(self):
        """Test that an empty separator falls back to '-'."""
        assert generate_license_key("ACME", 4, "", "Q") == "ACME-QQQQ"

    def test_single_character_alphabet(self):
        """Test that a one-character alphabet yields length copies of it."""
        for _ in range(20):
            assert generate_license_key("", 12, "-", "A") == "A" * 12

    def test_keys_use_only_alphabet(self):
        """Test that every random character comes from the alphabet."""
        alphabet = parse_charset("A-F,0-3")
        for _ in range(50):
            key = generate_license_key("", 24, "-", alphabet)
            assert set(key) <= set(alphabet)

    def test_non_positive_length_uses_default(self):
        """Test that length 0 falls back to 12."""
        assert len(generate_license_key("", 0)) == 12

    def test_keys_differ(self):
        """Test that repeated generation does not repeat keys."""
        keys = {generate_license_key("K", 16) for _ in range(100)}
        assert len(keys) == 100

    def test_random_source_failure(self, monkeypatch):
        """Test that an unavailable random source raises RandomSourceError."""

        def broken_choice(_alphabet):
            raise OSError("no entropy")

        monkeypatch.setattr("licenses.domain.license_key.secrets.choice", broken_choice)
        with pytest.raises(RandomSourceError):
            generate_license_key("K", 8)
