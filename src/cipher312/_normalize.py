"""
Normalization of trinary ciphertext.

The cipher picked up a compact shorthand for the two-digit building blocks
used inside larger patterns: ``4`` stands for ``11``, ``5`` for ``22`` and
``6`` for ``33``. Normalizing expands the shorthand so that the decoder
works over a single canonical alphabet.
"""

from __future__ import annotations

__all__ = ["NormalizedCiphertext", "normalize", "SHORTHAND_EXPANSIONS"]

# Shorthand digit → canonical two-digit pair
SHORTHAND_EXPANSIONS = {
    "4": "11",
    "5": "22",
    "6": "33",
}

_SHORTHAND_MAP = str.maketrans(SHORTHAND_EXPANSIONS)


class NormalizedCiphertext:
    """
    Ciphertext with every shorthand digit expanded.

    Instances are immutable; two spellings of the same digit sequence
    compare equal once normalized.

    Example:
        >>> NormalizedCiphertext("41fk").text
        '111fk'
    """

    __slots__ = ("_text",)

    def __init__(self, ciphertext: str) -> None:
        object.__setattr__(self, "_text", ciphertext.translate(_SHORTHAND_MAP))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def text(self) -> str:
        """The canonical digit string."""
        return self._text

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._text!r})"

    def __len__(self) -> int:
        return len(self._text)

    def __eq__(self, other) -> bool:
        if isinstance(other, NormalizedCiphertext):
            return self._text == other._text
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._text)

    def __reduce__(self):
        # Normalization is idempotent, so rebuilding from the text is exact
        return (type(self), (self._text,))


def normalize(text: str) -> NormalizedCiphertext:
    """
    Expand shorthand digits in ciphertext.

    Every other character, including the table digits and anything the
    cipher does not know about, passes through unchanged and in order.

    Args:
        text: Raw ciphertext (may be empty)

    Returns:
        The normalized ciphertext

    Example:
        >>> normalize("1321521321353").text
        '132122213213223'
    """
    return NormalizedCiphertext(text)
