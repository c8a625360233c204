"""
Symbol table submodule.

Re-exports the static cipher tables and the mapping construction helpers.
"""

from cipher312.symbols._tables import (
    REPLACEMENT_RULES,
    SYMBOL_TABLES,
    V1_SYMBOL_MAPPING,
    V2_SYMBOL_MAPPING,
    Mapping,
    build_mappings,
    expand_variants,
    mappings_for,
)

__all__ = [
    "REPLACEMENT_RULES",
    "SYMBOL_TABLES",
    "V1_SYMBOL_MAPPING",
    "V2_SYMBOL_MAPPING",
    "Mapping",
    "build_mappings",
    "expand_variants",
    "mappings_for",
]
