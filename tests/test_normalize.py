"""Tests for text normalization and the embedded stopword list."""

import pytest

from zksummary.errors import InvalidEncodingError
from zksummary.kernel.normalize import (
    decode_input,
    fold_ascii,
    load_stopwords,
    normalize,
    stopwords_bytes,
    stopwords_digest,
    tokenize,
)


class TestStopwords:
    def test_loaded_once_and_immutable(self):
        first = load_stopwords()
        assert first is load_stopwords()
        assert isinstance(first, frozenset)

    def test_contains_common_words(self):
        stopwords = load_stopwords()
        assert "the" in stopwords
        assert "over" in stopwords
        assert "and" in stopwords

    def test_does_not_contain_content_words(self):
        stopwords = load_stopwords()
        for word in ("quick", "brown", "fox", "dog", "cat", "zebra", "apple"):
            assert word not in stopwords

    def test_entries_are_lowercase_ascii_words(self):
        for word in load_stopwords():
            assert word.isascii() and word.isalpha() and word == word.lower()

    def test_resource_is_one_word_per_line(self):
        lines = stopwords_bytes().decode("utf-8").splitlines()
        assert len(lines) == len(load_stopwords())

    def test_digest_format(self):
        digest = stopwords_digest()
        assert digest.startswith("sha256:")
        assert len(digest) == len("sha256:") + 64


class TestDecodeInput:
    def test_valid_utf8(self):
        assert decode_input("café".encode("utf-8")) == "café"

    def test_invalid_utf8_raises(self):
        with pytest.raises(InvalidEncodingError, match="not valid UTF-8"):
            decode_input(b"abc\xff\xfe")

    def test_invalid_encoding_is_value_error(self):
        with pytest.raises(ValueError):
            decode_input(b"\xc3\x28")


class TestTokenize:
    def test_fold_ascii_only(self):
        assert fold_ascii("HeLLo \u00c9COLE") == "hello \u00c9cole"

    def test_splits_on_non_letters(self):
        assert tokenize("one,two  three\nfour4five") == ["one", "two", "three", "four", "five"]

    def test_digits_and_punctuation_are_delimiters(self):
        assert tokenize("abc123def!!ghi") == ["abc", "def", "ghi"]

    def test_non_ascii_letters_are_delimiters(self):
        assert tokenize("café naïve") == ["caf", "na", "ve"]

    def test_apostrophes_split_words(self):
        assert tokenize("don't") == ["don", "t"]

    def test_empty(self):
        assert tokenize("") == []
        assert tokenize("  123 ... ") == []


class TestNormalize:
    def test_removes_stopwords_preserving_order(self):
        tokens = normalize(b"The quick brown fox jumps over the lazy dog. The dog barks.")
        assert tokens == ["quick", "brown", "fox", "jumps", "lazy", "dog", "dog", "barks"]

    def test_case_folded_before_stopword_match(self):
        assert normalize(b"THE The tHe cat") == ["cat"]

    def test_empty_input(self):
        assert normalize(b"") == []

    def test_only_stopwords(self):
        assert normalize(b"the and of to") == []

    def test_invalid_utf8(self):
        with pytest.raises(InvalidEncodingError):
            normalize(b"cat \x80 dog")

    def test_deterministic(self):
        raw = b"Zebra apple, ZEBRA; apple! mango"
        assert normalize(raw) == normalize(raw)
