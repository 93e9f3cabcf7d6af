from __future__ import annotations

"""
Normalisation helpers for concept labels and search queries.

* normalize_label(text) -> str
    Trimmed, whitespace-collapsed, NFKC label suitable for display.

* concept_key(text) -> str
    Lower-cased lookup key used for opposites tables and cache keys.
"""

import re
import unicodedata

_WS_RE = re.compile(r"\s+")


def normalize_label(text: str) -> str:
    if not text:
        return ""
    t = unicodedata.normalize("NFKC", str(text))
    t = t.replace("–", "-").replace("—", "-")
    return _WS_RE.sub(" ", t).strip()


def concept_key(text: str) -> str:
    return normalize_label(text).lower()
