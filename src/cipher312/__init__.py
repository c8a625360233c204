"""
cipher312: decoder for the trinary cipher.

Decodes digit ciphertext into text under either cipher generation, with
v2 Unicode escapes and a best-effort rendering of anything undecodable.

Basic usage:
    >>> from cipher312 import decode_text
    >>> decode_text("1321521321353")
    'HELLO'
    >>> decode_text("41fk")
    'A¿fk?'

Structured usage:
    >>> from cipher312 import Codec, normalize
    >>> result = Codec().decode_v2(normalize("794842328138412791"))
    >>> result.graphemes
    (KnownValue(value='👻'),)
"""

import logging

from cipher312._normalize import NormalizedCiphertext, normalize
from cipher312.symbols import (
    REPLACEMENT_RULES,
    V1_SYMBOL_MAPPING,
    V2_SYMBOL_MAPPING,
    Mapping,
    build_mappings,
    expand_variants,
)
from cipher312.codec import (
    Cipher312Error,
    Codec,
    DecodeError,
    DecodeResult,
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

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "decode_text",
    "NormalizedCiphertext",
    "normalize",
    "REPLACEMENT_RULES",
    "V1_SYMBOL_MAPPING",
    "V2_SYMBOL_MAPPING",
    "Mapping",
    "build_mappings",
    "expand_variants",
    "Cipher312Error",
    "Codec",
    "DecodeError",
    "DecodeResult",
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


def decode_text(text: str) -> str:
    """
    Normalize, decode and render ciphertext in one step.

    Tries the v2 table first and falls back to v1.

    Args:
        text: Raw ciphertext (shorthand digits allowed)

    Returns:
        Rendered plaintext, with ``¿...?`` around undecodable spans

    Raises:
        DecodeError: If the ciphertext is empty
    """
    return str(decode(normalize(text)))


# Lazy import for spaCy components (only when spacy is installed)
def __getattr__(name: str):
    if name == "TrinaryDecoderComponent":
        try:
            from cipher312.spacy import TrinaryDecoderComponent
            return TrinaryDecoderComponent
        except ImportError:
            raise ImportError(
                "spaCy integration requires spacy. "
                "Install with: pip install cipher312[spacy]"
            )
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
