"""
C-style string boundary.

Mirrors the native ``decode_string`` entry point: the input is a
null-terminated UTF-8 byte string, the outcome is a status code, and the
output is the rendered decoding. Failures are reported through the status
code and never raised.

Example:
    >>> from cipher312.ffi import DecodeStatus, decode_string
    >>> decode_string(b"41")
    (<DecodeStatus.SUCCESS: 0>, 'A')
    >>> decode_string(None)
    (<DecodeStatus.NULL_POINTER: 1>, None)
"""

from __future__ import annotations

import enum
import logging
from typing import Optional

from cipher312._normalize import normalize
from cipher312.codec._rules import DecodeError, decode

__all__ = ["DecodeStatus", "decode_string", "decode_string_to_bytes"]

logger = logging.getLogger(__name__)


class DecodeStatus(enum.IntEnum):
    """Result codes of the string boundary."""

    SUCCESS = 0
    # Either input or output is missing
    NULL_POINTER = 1
    # The input bytes are not valid UTF-8
    INVALID_UTF8 = 2
    # The ciphertext could not be decoded
    DECODING_FAILED = 3
    # The output string could not be built
    INTERNAL_ERROR = 4


def decode_string(data: Optional[bytes]) -> tuple[DecodeStatus, Optional[str]]:
    """
    Decode a null-terminated UTF-8 ciphertext.

    Bytes after the first NUL are ignored, as a C caller would see them.

    Args:
        data: Encoded ciphertext, or None for a null pointer

    Returns:
        Tuple of (status, rendered_text); rendered_text is None unless
        status is SUCCESS
    """
    if data is None:
        return DecodeStatus.NULL_POINTER, None

    data = bytes(data).split(b"\0", 1)[0]
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.debug("Rejecting input that is not UTF-8: %s", exc)
        return DecodeStatus.INVALID_UTF8, None

    try:
        result = decode(normalize(text))
    except DecodeError as exc:
        logger.debug("Decoding failed: %s", exc)
        return DecodeStatus.DECODING_FAILED, None

    rendered = str(result)
    # The output has to survive as a C string
    if "\0" in rendered:
        return DecodeStatus.INTERNAL_ERROR, None
    return DecodeStatus.SUCCESS, rendered


def decode_string_to_bytes(data: Optional[bytes]) -> tuple[DecodeStatus, Optional[bytes]]:
    """Like decode_string, but return the output as null-terminated UTF-8."""
    status, rendered = decode_string(data)
    if rendered is None:
        return status, None
    return status, rendered.encode("utf-8") + b"\0"
