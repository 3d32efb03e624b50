"""
Category name helpers.

Providers emit category labels with different cases and separators
("Sexual_Content", "sexual content", "SEXUAL/CONTENT"). Matching and
display labels are derived from the canonical string here.
"""
import re

_SEPARATORS = re.compile(r"[/_]")
_WORD_START = re.compile(r"\b\w")


def normalize_label(label: str) -> str:
    """Lower-case a label and replace each '/' or '_' with a space."""
    return _SEPARATORS.sub(" ", label.lower())


def labels_match(a: str, b: str) -> bool:
    """Two category labels match iff their normalized forms are equal."""
    return normalize_label(a) == normalize_label(b)


def canonical_category(label: str) -> str:
    """Canonical category key stored on results."""
    return label.strip().lower()


def display_label(category: str) -> str:
    """Human-readable label, e.g. 'graphic_content' -> 'Graphic Content'."""
    spaced = _SEPARATORS.sub(" ", category)
    return _WORD_START.sub(lambda m: m.group(0).upper(), spaced)
