"""
Unit tests for the DescriptionNormalizer.
"""

from __future__ import annotations

import pytest

from ledger_mapper.normalizer import DescriptionNormalizer


@pytest.fixture
def normalizer() -> DescriptionNormalizer:
    return DescriptionNormalizer()


class TestNormalizeDescription:
    def test_lowercase_and_strip(self, normalizer: DescriptionNormalizer) -> None:
        assert normalizer.normalize_description("  Trade Payables  ") == "trade payables"

    def test_punctuation_becomes_space(self, normalizer: DescriptionNormalizer) -> None:
        assert (
            normalizer.normalize_description("Property, Plant & Equipment")
            == "property plant & equipment"
        )

    def test_slash_splits_words(self, normalizer: DescriptionNormalizer) -> None:
        assert normalizer.normalize_description("Cash/Bank") == "cash bank"

    def test_hyphen_kept(self, normalizer: DescriptionNormalizer) -> None:
        assert normalizer.normalize_description("Right-of-Use Asset") == "right-of-use asset"

    def test_unicode_dash_normalised(self, normalizer: DescriptionNormalizer) -> None:
        assert normalizer.normalize_description("Long–term Debt") == "long-term debt"
        assert normalizer.normalize_description("Long—term Debt") == "long-term debt"

    def test_underscores_and_spaces_collapse(self, normalizer: DescriptionNormalizer) -> None:
        assert normalizer.normalize_description("Cash__at   Bank") == "cash at bank"

    def test_empty(self, normalizer: DescriptionNormalizer) -> None:
        assert normalizer.normalize_description("") == ""
        assert normalizer.normalize_description(None) == ""  # type: ignore[arg-type]

    def test_numbers_preserved(self, normalizer: DescriptionNormalizer) -> None:
        assert "2024" in normalizer.normalize_description("Loan 2024 (HSBC)")
