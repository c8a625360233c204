"""
Decoding submodule.

Re-exports the grapheme types, the Codec and the module-level decode
functions.
"""

from cipher312.codec._rules import (
    DEFAULT_MAX_DEPTH,
    ESCAPE_DELIMITER,
    Cipher312Error,
    Codec,
    DecodeError,
    DecodeResult,
    Grapheme,
    InvalidUnicode,
    KnownValue,
    UnicodeParseError,
    UnknownSequence,
    decode,
    decode_v1,
    decode_v2,
    match_one,
    render,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ESCAPE_DELIMITER",
    "Cipher312Error",
    "Codec",
    "DecodeError",
    "DecodeResult",
    "Grapheme",
    "InvalidUnicode",
    "KnownValue",
    "UnicodeParseError",
    "UnknownSequence",
    "decode",
    "decode_v1",
    "decode_v2",
    "match_one",
    "render",
]
