"""
Symbol tables and pattern variants for the trinary cipher.

Each cipher version has an ordered table of (pattern, character) pairs.
Letters are three-digit base-3 codes written with the digits 1-3 (A = 111
through Z = 332), ``0`` is a word space. The v2 generation adds a
terminal full stop and the numerals, written as a row digit, the marker
``8`` and a column digit (1 = 181 through 9 = 383, 0 = 888), which is what
the Unicode escape payloads are spelled in.

Table order is match priority: the matcher takes the first pattern that
matches, not the longest.

Example:
    >>> from cipher312.symbols import expand_variants, REPLACEMENT_RULES
    >>> expand_variants("111", REPLACEMENT_RULES)
    ('41', '14')
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

__all__ = [
    "SymbolMapping",
    "ReplacementRule",
    "Mapping",
    "V1_SYMBOL_MAPPING",
    "V2_SYMBOL_MAPPING",
    "SYMBOL_TABLES",
    "REPLACEMENT_RULES",
    "expand_variants",
    "build_mappings",
    "mappings_for",
]

SymbolMapping = tuple[str, str]
ReplacementRule = tuple[str, str]

# =============================================================================
# Static Tables
# =============================================================================

_LETTERS: tuple[SymbolMapping, ...] = (
    ("111", "A"),
    ("112", "B"),
    ("113", "C"),
    ("121", "D"),
    ("122", "E"),
    ("123", "F"),
    ("131", "G"),
    ("132", "H"),
    ("133", "I"),
    ("211", "J"),
    ("212", "K"),
    ("213", "L"),
    ("221", "M"),
    ("222", "N"),
    ("223", "O"),
    ("231", "P"),
    ("232", "Q"),
    ("233", "R"),
    ("311", "S"),
    ("312", "T"),
    ("313", "U"),
    ("321", "V"),
    ("322", "W"),
    ("323", "X"),
    ("331", "Y"),
    ("332", "Z"),
)

# Before the trinary update
V1_SYMBOL_MAPPING: tuple[SymbolMapping, ...] = _LETTERS + (
    ("0", " "),
)

# After the trinary update
V2_SYMBOL_MAPPING: tuple[SymbolMapping, ...] = _LETTERS + (
    ("333", "."),
    ("0", " "),
    ("181", "1"),
    ("182", "2"),
    ("183", "3"),
    ("281", "4"),
    ("282", "5"),
    ("283", "6"),
    ("381", "7"),
    ("382", "8"),
    ("383", "9"),
    ("888", "0"),
)

SYMBOL_TABLES: dict[str, tuple[SymbolMapping, ...]] = {
    "v1": V1_SYMBOL_MAPPING,
    "v2": V2_SYMBOL_MAPPING,
}

# Canonical pair → shorthand digit (the inverse of normalization)
REPLACEMENT_RULES: tuple[ReplacementRule, ...] = (
    ("11", "4"),
    ("22", "5"),
    ("33", "6"),
)


# =============================================================================
# Variant Expansion
# =============================================================================


def expand_variants(
    pattern: str, rules: tuple[ReplacementRule, ...] = REPLACEMENT_RULES
) -> tuple[str, ...]:
    """
    Derive the shorthand spellings of a table pattern.

    Each two-character window matching a rule source yields one variant
    with just that window replaced. Substitutions are never combined, so
    ``"1111"`` gives three single-substitution variants and no ``"44"``.

    Args:
        pattern: A canonical table pattern
        rules: Ordered (two-character source, shorthand) pairs

    Returns:
        Variants in generation order (window position, then rule order)

    Example:
        >>> expand_variants("1122")
        ('422', '115')
    """
    variants = []
    for i in range(len(pattern) - 1):
        window = pattern[i : i + 2]
        for source, shorthand in rules:
            if window == source:
                variants.append(pattern[:i] + shorthand + pattern[i + 2 :])
    return tuple(variants)


# =============================================================================
# Mapping Construction
# =============================================================================


@dataclass(frozen=True)
class Mapping:
    """A table pattern, its shorthand variants, and the character it decodes to."""

    source: str
    variants: tuple[str, ...]
    target: str


def build_mappings(
    table: tuple[SymbolMapping, ...] | list[SymbolMapping],
    rules: tuple[ReplacementRule, ...] = REPLACEMENT_RULES,
) -> tuple[Mapping, ...]:
    """
    Build the ordered mapping list for a symbol table.

    Raises:
        ValueError: If a pattern is empty, since it would match without
            consuming input
    """
    for source, target in table:
        if not source:
            raise ValueError(f"Empty pattern for {target!r}")
    return tuple(
        Mapping(source=source, variants=expand_variants(source, rules), target=target)
        for source, target in table
    )


@lru_cache(maxsize=None)
def mappings_for(version: str) -> tuple[Mapping, ...]:
    """
    Return the mappings for a cipher version (``"v1"`` or ``"v2"``).

    The result is immutable and cached per version.
    """
    try:
        table = SYMBOL_TABLES[version]
    except KeyError:
        raise ValueError(
            f"Unknown cipher version: {version!r}. Expected one of {sorted(SYMBOL_TABLES)}."
        ) from None
    return build_mappings(table)
