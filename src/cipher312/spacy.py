"""
spaCy integration for cipher312.

Provides a pipeline component that decodes trinary ciphertext tokens.

Example:
    >>> import spacy
    >>> nlp = spacy.blank("xx")
    >>> nlp.add_pipe("trinary_decoder")
    >>> doc = nlp("1321521321353 3121534312")
    >>> doc._.trinary_decoded
    'HELLO TEST'
"""

from typing import Optional

from spacy.language import Language
from spacy.tokens import Doc, Token

from cipher312.codec._rules import Codec, DecodeError, DEFAULT_MAX_DEPTH

__all__ = [
    "TrinaryDecoderComponent",
    "create_trinary_decoder",
]

_VERSIONS = ("auto", "v1", "v2")
_ASCII_DIGITS = frozenset("0123456789")


@Language.factory(
    "trinary_decoder",
    default_config={"version": "auto", "digits_only": True, "max_depth": DEFAULT_MAX_DEPTH},
    assigns=["doc._.trinary_decoded", "token._.trinary_decoded"],
)
def create_trinary_decoder(
    nlp: Language,
    name: str,
    version: str = "auto",
    digits_only: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> "TrinaryDecoderComponent":
    """Create a trinary decoder pipeline component."""
    return TrinaryDecoderComponent(
        nlp, name, version=version, digits_only=digits_only, max_depth=max_depth
    )


class TrinaryDecoderComponent:
    """
    spaCy pipeline component for trinary ciphertext.

    Extensions:
        - Token._.trinary_decoded: Rendered decoding of the token, or None
          if the token is not ciphertext.
        - Doc._.trinary_decoded: Document text with every decoded token
          replaced by its decoding.

    With ``digits_only`` (the default) only tokens made of ASCII digits are
    treated as ciphertext, so ordinary words pass through.
    """

    def __init__(
        self,
        nlp: Language,
        name: str,
        *,
        version: str = "auto",
        digits_only: bool = True,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.name = name
        self.version = version
        self.digits_only = digits_only

        if version not in _VERSIONS:
            raise ValueError(
                f"Unknown version: {version}. Expected one of {', '.join(_VERSIONS)}."
            )

        self._codec = Codec(max_depth=max_depth)

        if not Doc.has_extension("trinary_decoded"):
            Doc.set_extension("trinary_decoded", default=None)
        if not Token.has_extension("trinary_decoded"):
            Token.set_extension("trinary_decoded", default=None)

    def _decode(self, text: str) -> Optional[str]:
        if self.digits_only and not (text and set(text) <= _ASCII_DIGITS):
            return None
        try:
            if self.version == "v1":
                result = self._codec.decode_v1(text)
            elif self.version == "v2":
                result = self._codec.decode_v2(text)
            else:
                result = self._codec.decode(text)
        except DecodeError:
            return None
        return str(result)

    def __call__(self, doc: Doc) -> Doc:
        parts = []
        for token in doc:
            decoded = self._decode(token.text)
            token._.trinary_decoded = decoded
            parts.append(token.text if decoded is None else decoded)
            parts.append(token.whitespace_)
        doc._.trinary_decoded = "".join(parts)
        return doc

    def to_disk(self, path: str, *, exclude: tuple[str, ...] = ()) -> None:
        pass

    def from_disk(
        self, path: str, *, exclude: tuple[str, ...] = ()
    ) -> "TrinaryDecoderComponent":
        return self

    def to_bytes(self, *, exclude: tuple[str, ...] = ()) -> bytes:
        return b""

    def from_bytes(
        self, data: bytes, *, exclude: tuple[str, ...] = ()
    ) -> "TrinaryDecoderComponent":
        return self


# =============================================================================
# Utility Functions
# =============================================================================


def get_decoder_pipe(nlp: Language) -> Optional[TrinaryDecoderComponent]:
    """Get the trinary decoder component from a pipeline."""
    if "trinary_decoder" in nlp.pipe_names:
        return nlp.get_pipe("trinary_decoder")
    return None
