"""
Description Normalization Layer.

Transforms raw account descriptions into a uniform representation so that
the classifier rules and the confidence scorer compare clean strings.

Transformations applied (in order):
1. Strip leading / trailing whitespace
2. Lowercase conversion
3. Unicode dashes → ASCII hyphen
4. Punctuation → space (except hyphens inside words and '&')
5. Collapse runs of whitespace / underscores into a single space
"""

from __future__ import annotations

import re

from ledger_mapper.logging_setup import get_logger

logger = get_logger("normalizer")


class DescriptionNormalizer:
    """Stateless description normaliser.  All methods are pure functions."""

    # Characters to blank out (keep letters, digits, spaces, hyphens, '&')
    _PUNCT_RE = re.compile(r"[^a-z0-9\s\-&]")

    # Collapse whitespace and underscores
    _MULTI_SPACE_RE = re.compile(r"[\s_]+")

    def normalize_description(self, raw: str) -> str:
        """Return the comparable form of an account description.

        ``None`` and empty input yield ``""``.
        """
        if not raw:
            return ""
        text = str(raw).strip().lower()
        text = text.replace("–", "-").replace("—", "-")
        text = self._PUNCT_RE.sub(" ", text)
        text = self._MULTI_SPACE_RE.sub(" ", text).strip()

        logger.debug("normalize_description: %r → %r", raw, text)
        return text
