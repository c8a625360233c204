"""
Table-driven decoder for the trinary cipher.

Decoding walks the normalized ciphertext left to right. At each position
the v2 decoder first tries a Unicode escape (a hexadecimal codepoint
spelled in the cipher between two ``791`` delimiters), then the symbol
table. When no pattern matches, up to three raw characters are kept as an
unknown sequence so decoding always makes progress and a partly garbled
message still yields readable output.

Example:
    >>> from cipher312.codec import decode
    >>> str(decode("1321521321353"))
    'HELLO'

    >>> from cipher312.codec import Codec
    >>> codec = Codec()
    >>> [g.value for g in codec.decode_v1("41")]
    ['A']
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Union

from cipher312._normalize import NormalizedCiphertext, normalize
from cipher312.symbols._tables import Mapping, mappings_for

__all__ = [
    "Cipher312Error",
    "DecodeError",
    "UnicodeParseError",
    "KnownValue",
    "UnknownSequence",
    "InvalidUnicode",
    "Grapheme",
    "DecodeResult",
    "Codec",
    "match_one",
    "render",
    "decode_v1",
    "decode_v2",
    "decode",
    "ESCAPE_DELIMITER",
    "DEFAULT_MAX_DEPTH",
]

logger = logging.getLogger(__name__)

ESCAPE_DELIMITER = "791"

# Escape payloads never contain the delimiter, so real input nests one level deep
DEFAULT_MAX_DEPTH = 8

# Longest raw span kept when nothing in the table matches
_UNKNOWN_MAX_LEN = 3

UNKNOWN_OPEN = "¿"
UNKNOWN_CLOSE = "?"
INVALID_PLACEHOLDER = "⊠"

_HEX_RE = re.compile(r"[0-9A-Fa-f]+")

_MAX_CODEPOINT = 0x10FFFF
_SURROGATES = range(0xD800, 0xE000)


# =============================================================================
# Errors
# =============================================================================


class Cipher312Error(Exception):
    """Base class for errors raised by cipher312."""


class DecodeError(Cipher312Error, ValueError):
    """The ciphertext could not be decoded at all (e.g. it was empty)."""


class UnicodeParseError(enum.Enum):
    """Why an escape sequence did not resolve to a character."""

    INVALID_CIPHER = "invalid_cipher"
    INVALID_HEXADECIMAL = "invalid_hexadecimal"
    DEPTH_EXCEEDED = "depth_exceeded"


# =============================================================================
# Graphemes
# =============================================================================


@dataclass(frozen=True)
class KnownValue:
    """A pattern resolved to one output character."""

    value: str
    source: str = field(default="", compare=False, repr=False)


@dataclass(frozen=True)
class UnknownSequence:
    """Raw ciphertext that no pattern matched (one to three characters)."""

    text: str

    @property
    def source(self) -> str:
        return self.text


@dataclass(frozen=True)
class InvalidUnicode:
    """An escape sequence whose payload is not a valid codepoint."""

    reason: UnicodeParseError
    source: str = field(default="", compare=False, repr=False)


Grapheme = Union[KnownValue, UnknownSequence, InvalidUnicode]


@dataclass(frozen=True)
class DecodeResult:
    """
    Ordered graphemes produced by one decode call.

    ``str(result)`` renders the graphemes for display.
    """

    graphemes: tuple[Grapheme, ...]

    def __iter__(self) -> Iterator[Grapheme]:
        return iter(self.graphemes)

    def __len__(self) -> int:
        return len(self.graphemes)

    def __getitem__(self, idx: int) -> Grapheme:
        return self.graphemes[idx]

    def __str__(self) -> str:
        return render(self)

    @property
    def source(self) -> str:
        """The normalized ciphertext consumed, reassembled from the graphemes."""
        return "".join(g.source for g in self.graphemes)


# =============================================================================
# Rendering
# =============================================================================


def _render_grapheme(grapheme: Grapheme) -> str:
    if isinstance(grapheme, KnownValue):
        return grapheme.value
    if isinstance(grapheme, UnknownSequence):
        return f"{UNKNOWN_OPEN}{grapheme.text}{UNKNOWN_CLOSE}"
    # All InvalidUnicode reasons collapse to the same placeholder
    return INVALID_PLACEHOLDER


def render(result: Union[DecodeResult, Sequence[Grapheme]]) -> str:
    """
    Render decoded graphemes as display text.

    Unknown sequences are wrapped as ``¿...?`` and keep the raw digits;
    failed escapes become ``⊠``.

    Args:
        result: A DecodeResult or any sequence of graphemes

    Returns:
        The rendered string

    Example:
        >>> render([KnownValue("A"), UnknownSequence("fk")])
        'A¿fk?'
    """
    return "".join(_render_grapheme(g) for g in result)


# =============================================================================
# Matching
# =============================================================================


def match_one(
    mappings: Sequence[Mapping], text: str, pos: int = 0
) -> tuple[Grapheme, int]:
    """
    Match a single grapheme at ``pos``.

    Mappings are tried in table order; within a mapping the canonical
    pattern comes before its variants. The first prefix match wins, even
    when a later pattern would match more characters. With no match, up
    to three characters are taken as an unknown sequence.

    Args:
        mappings: Ordered mappings for one cipher version
        text: The text being decoded
        pos: Position to match at

    Returns:
        Tuple of (grapheme, consumed_length), consumed_length >= 1

    Raises:
        DecodeError: If ``pos`` is at or past the end of ``text``
    """
    if pos >= len(text):
        raise DecodeError(f"No input left to match at position {pos}")

    for mapping in mappings:
        if text.startswith(mapping.source, pos):
            return KnownValue(mapping.target, mapping.source), len(mapping.source)
        for variant in mapping.variants:
            if text.startswith(variant, pos):
                return KnownValue(mapping.target, variant), len(variant)

    raw = text[pos : pos + _UNKNOWN_MAX_LEN]
    return UnknownSequence(raw), len(raw)


def _parse_codepoint(digits: str) -> Optional[str]:
    """Interpret rendered escape contents as a hexadecimal codepoint."""
    if not _HEX_RE.fullmatch(digits):
        return None
    value = int(digits, 16)
    if value > _MAX_CODEPOINT or value in _SURROGATES:
        return None
    return chr(value)


# =============================================================================
# Codec
# =============================================================================


class Codec:
    """
    Decoder for both cipher generations.

    Args:
        max_depth: Deepest escape nesting to decode before giving up with
            ``InvalidUnicode(DEPTH_EXCEEDED)``

    Example:
        >>> codec = Codec()
        >>> str(codec.decode("794842328138412791"))
        '👻'
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self.max_depth = max_depth

    def decode_v1(self, ciphertext: Union[NormalizedCiphertext, str]) -> DecodeResult:
        """
        Decode with the early table, found before the trinary update.

        Args:
            ciphertext: Normalized ciphertext (a plain string is normalized)

        Returns:
            The decoded graphemes

        Raises:
            DecodeError: If the ciphertext is empty
        """
        text = _as_normalized(ciphertext).text
        mappings = mappings_for("v1")
        graphemes = []
        pos = 0
        while pos < len(text):
            grapheme, consumed = match_one(mappings, text, pos)
            graphemes.append(grapheme)
            pos += consumed
        return _finish(graphemes, "v1")

    def decode_v2(self, ciphertext: Union[NormalizedCiphertext, str]) -> DecodeResult:
        """
        Decode with the current table and Unicode escapes.

        Args:
            ciphertext: Normalized ciphertext (a plain string is normalized)

        Returns:
            The decoded graphemes

        Raises:
            DecodeError: If the ciphertext is empty
        """
        return self._decode_v2(_as_normalized(ciphertext).text, depth=0)

    def decode(self, ciphertext: Union[NormalizedCiphertext, str]) -> DecodeResult:
        """
        Decode with v2, falling back to v1 as a whole if v2 fails.

        Raises:
            DecodeError: If neither version can decode the ciphertext
        """
        ciphertext = _as_normalized(ciphertext)
        try:
            return self.decode_v2(ciphertext)
        except DecodeError as exc:
            logger.debug("v2 decode failed (%s), retrying with v1", exc)
        return self.decode_v1(ciphertext)

    def _decode_v2(self, text: str, depth: int) -> DecodeResult:
        mappings = mappings_for("v2")
        graphemes = []
        pos = 0
        while pos < len(text):
            escaped = self._match_escape(text, pos, depth)
            if escaped is None:
                grapheme, consumed = match_one(mappings, text, pos)
            else:
                grapheme, consumed = escaped
            graphemes.append(grapheme)
            pos += consumed
        return _finish(graphemes, "v2")

    def _match_escape(
        self, text: str, pos: int, depth: int
    ) -> Optional[tuple[Grapheme, int]]:
        """
        Try to read a ``791 ... 791`` escape at ``pos``.

        Returns None when there is no opening delimiter or no closing one,
        in which case the caller falls through to the symbol table.
        """
        if not text.startswith(ESCAPE_DELIMITER, pos):
            return None
        start = pos + len(ESCAPE_DELIMITER)
        end = text.find(ESCAPE_DELIMITER, start)
        if end == -1:
            return None

        consumed = end + len(ESCAPE_DELIMITER) - pos
        source = text[pos : pos + consumed]
        interior = text[start:end]

        if depth >= self.max_depth:
            logger.debug(
                "Escape at position %d exceeds max depth %d", pos, self.max_depth
            )
            return InvalidUnicode(UnicodeParseError.DEPTH_EXCEEDED, source), consumed

        try:
            inner = self._decode_v2(normalize(interior).text, depth=depth + 1)
        except DecodeError:
            logger.debug("Escape at position %d has an empty payload", pos)
            return InvalidUnicode(UnicodeParseError.INVALID_CIPHER, source), consumed

        digits = render(inner)
        char = _parse_codepoint(digits)
        if char is None:
            logger.debug(
                "Escape at position %d is not a valid codepoint: %r", pos, digits
            )
            return InvalidUnicode(UnicodeParseError.INVALID_HEXADECIMAL, source), consumed
        return KnownValue(char, source), consumed


def _as_normalized(ciphertext: Union[NormalizedCiphertext, str]) -> NormalizedCiphertext:
    if isinstance(ciphertext, NormalizedCiphertext):
        return ciphertext
    return normalize(ciphertext)


def _finish(graphemes: list[Grapheme], version: str) -> DecodeResult:
    # At least one grapheme is required, which rules out empty input
    if not graphemes:
        raise DecodeError(f"Cannot decode empty ciphertext with {version}")
    return DecodeResult(tuple(graphemes))


# =============================================================================
# Module-level Convenience Functions
# =============================================================================

# Singleton instance for convenience functions
_default_codec: Optional[Codec] = None


def _get_default_codec() -> Codec:
    global _default_codec
    if _default_codec is None:
        _default_codec = Codec()
    return _default_codec


def decode_v1(ciphertext: Union[NormalizedCiphertext, str]) -> DecodeResult:
    """Decode with the v1 table using a shared codec."""
    return _get_default_codec().decode_v1(ciphertext)


def decode_v2(ciphertext: Union[NormalizedCiphertext, str]) -> DecodeResult:
    """Decode with the v2 table and escapes using a shared codec."""
    return _get_default_codec().decode_v2(ciphertext)


def decode(ciphertext: Union[NormalizedCiphertext, str]) -> DecodeResult:
    """
    Decode ciphertext, preferring v2 and falling back to v1.

    Convenience function that uses a shared codec instance.

    Example:
        >>> str(decode("54634341653520343124126312"))
        'MISSION START'
    """
    return _get_default_codec().decode(ciphertext)
