"""URL-safe base64 without padding, as used by every JWT segment."""

from __future__ import annotations

import base64
import binascii
import re

from jwtkit.errors import MalformedEncodingError

_ALPHABET_RE = re.compile(r"[A-Za-z0-9_-]*")
_TO_STANDARD = str.maketrans("-_", "+/")


def encode(data: bytes | str) -> str:
    """Encode `data` as base64url text with trailing `=` stripped.

    Text input is UTF-8 encoded first.
    """

    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode(text: str | bytes) -> bytes:
    """Decode unpadded base64url text.

    Padding is restored before decoding, so callers pass the stripped form
    found in tokens. Padded input, whitespace and characters from the
    standard alphabet (`+`, `/`) are all rejected.
    """

    if isinstance(text, bytes):
        try:
            text = text.decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedEncodingError("base64url input is not ASCII") from e

    if _ALPHABET_RE.fullmatch(text) is None:
        raise MalformedEncodingError("base64url input contains invalid characters")
    if len(text) % 4 == 1:
        raise MalformedEncodingError(f"base64url input has impossible length {len(text)}")

    padded = text.translate(_TO_STANDARD) + "=" * ((4 - len(text) % 4) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except binascii.Error as e:  # pragma: no cover - alphabet and length checked above
        raise MalformedEncodingError(f"invalid base64url input: {e}") from e
