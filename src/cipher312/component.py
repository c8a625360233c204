"""
Component-style interface to the decoder.

Exposes the resource types of the ``cipher312`` component world: a
normalized ciphertext resource, a decode result resource with tagged
codepoints, and the three codec functions. Codec functions return None
on failure instead of raising.

Example:
    >>> from cipher312 import component
    >>> ciphertext = component.NormalizedCiphertext.new("41fk")
    >>> result = component.decode(ciphertext)
    >>> result.get_codepoints()
    [Codepoint(value='A'), Unknown(text='fk')]
    >>> result.to_string()
    'A¿fk?'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from cipher312 import _normalize
from cipher312.codec import _rules

__all__ = [
    "NormalizedCiphertext",
    "DecodeResult",
    "Codepoint",
    "Unknown",
    "InvalidUnicode",
    "TaggedGrapheme",
    "decode_v1",
    "decode_v2",
    "decode",
]


@dataclass(frozen=True)
class Codepoint:
    value: str


@dataclass(frozen=True)
class Unknown:
    text: str


@dataclass(frozen=True)
class InvalidUnicode:
    pass


TaggedGrapheme = Union[Codepoint, Unknown, InvalidUnicode]


def _tag(grapheme: _rules.Grapheme) -> TaggedGrapheme:
    if isinstance(grapheme, _rules.KnownValue):
        return Codepoint(grapheme.value)
    if isinstance(grapheme, _rules.UnknownSequence):
        return Unknown(grapheme.text)
    return InvalidUnicode()


class NormalizedCiphertext:
    """Resource wrapping a normalized ciphertext."""

    def __init__(self, ciphertext: str) -> None:
        self._inner = _normalize.normalize(ciphertext)

    @classmethod
    def new(cls, ciphertext: str) -> "NormalizedCiphertext":
        return cls(ciphertext)

    def text(self) -> str:
        return self._inner.text


class DecodeResult:
    """Resource wrapping a decode result."""

    def __init__(self, result: _rules.DecodeResult) -> None:
        self._result = result

    def get_codepoints(self) -> list[TaggedGrapheme]:
        return [_tag(g) for g in self._result]

    def to_string(self) -> str:
        return _rules.render(self._result)


def _call(
    fn: Callable[[_normalize.NormalizedCiphertext], _rules.DecodeResult],
    ciphertext: NormalizedCiphertext,
) -> Optional[DecodeResult]:
    try:
        return DecodeResult(fn(ciphertext._inner))
    except _rules.DecodeError:
        return None


def decode_v1(ciphertext: NormalizedCiphertext) -> Optional[DecodeResult]:
    return _call(_rules.decode_v1, ciphertext)


def decode_v2(ciphertext: NormalizedCiphertext) -> Optional[DecodeResult]:
    return _call(_rules.decode_v2, ciphertext)


def decode(ciphertext: NormalizedCiphertext) -> Optional[DecodeResult]:
    """Decode with v2, falling back to v1; None if both fail."""
    return _call(_rules.decode, ciphertext)
