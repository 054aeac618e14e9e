"""Encode and decode compact JWTs.

A token is `header.payload.signature`, each segment base64url-encoded. The
signature always covers the exact header and payload segments as they
appear on the wire, never a re-serialization of the decoded objects.
"""

from __future__ import annotations

import json
import logging
import re
import time
from collections.abc import Mapping
from typing import Any

from jwtkit import base64url, signing
from jwtkit.algorithms import DEFAULT_ALGORITHM, get_algorithm
from jwtkit.errors import (
    MalformedEncodingError,
    MalformedTokenError,
    MissingKeyError,
    MissingTokenError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenNotYetActiveError,
)
from jwtkit.signing import KeyLike

logger = logging.getLogger("jwtkit.codec")

_PUBLIC_KEY_RE = re.compile(r"BEGIN( RSA)? PUBLIC KEY")
_ENCODE_OPTIONS = frozenset({"header"})


def merge_headers(base: Mapping[str, Any], extra: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a new header: `base` fields first, then `extra` fields.

    `extra` wins on key collisions, `typ` and `alg` included. Neither input is
    modified.
    """

    merged = dict(base)
    if extra:
        merged.update(extra)
    return merged


def _json_segment(obj: Any) -> str:
    # NaN and Infinity are not JSON; other consumers would reject the token.
    text = json.dumps(obj, separators=(",", ":"), allow_nan=False)
    return base64url.encode(text.encode("utf-8"))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_segment(segment: str, *, name: str) -> dict[str, Any]:
    try:
        raw = base64url.decode(segment)
        obj = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except MalformedEncodingError as e:
        raise MalformedTokenError(f"Invalid token: {name} segment is not base64url") from e
    except ValueError as e:
        # Bad UTF-8, bad JSON, or NaN/Infinity literals.
        raise MalformedTokenError(f"Invalid token: {name} segment is not JSON") from e
    if not isinstance(obj, dict):
        raise MalformedTokenError(f"Invalid token: {name} segment is not a JSON object")
    return obj


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _looks_like_public_key(key: KeyLike | None) -> bool:
    if key is None:
        return False
    if isinstance(key, (bytes, bytearray)):
        text = bytes(key).decode("latin-1")
    elif isinstance(key, str):
        text = key
    else:
        raise TypeError(f"key must be str or bytes, not {type(key).__name__}")
    return _PUBLIC_KEY_RE.search(text) is not None


def get_unverified_header(token: str) -> dict[str, Any]:
    """Return the decoded header of `token` without checking anything else.

    Useful for picking a key (for example by `kid`) before calling `decode`.
    """

    if not token:
        raise MissingTokenError("No token supplied")
    segments = token.split(".")
    if len(segments) != 3:
        raise MalformedTokenError("Invalid token: Not enough or too many segments")
    return _parse_segment(segments[0], name="header")


def encode(
    payload: Mapping[str, Any],
    key: KeyLike,
    algorithm: str = DEFAULT_ALGORITHM,
    options: Mapping[str, Any] | None = None,
) -> str:
    """Sign `payload` and return a compact token.

    `options` may carry a `"header"` mapping whose fields are merged over
    `{"typ": "JWT", "alg": algorithm}` (see `merge_headers`).
    """

    if not key:
        raise MissingKeyError("Key is required")
    alg = get_algorithm(algorithm)
    if not isinstance(payload, Mapping):
        raise TypeError(f"payload must be a mapping, not {type(payload).__name__}")

    extra_header: Mapping[str, Any] | None = None
    if options:
        unknown = set(options) - _ENCODE_OPTIONS
        if unknown:
            raise TypeError(f"Unknown encode options: {', '.join(sorted(unknown))}")
        extra_header = options.get("header")

    header = merge_headers({"typ": "JWT", "alg": alg.name}, extra_header)

    header_segment = _json_segment(header)
    payload_segment = _json_segment(payload)
    signing_input = f"{header_segment}.{payload_segment}"
    signature_segment = signing.sign(signing_input, key, alg)
    return f"{signing_input}.{signature_segment}"


def decode(
    token: str | bytes,
    key: KeyLike | None,
    no_verify: bool = False,
    algorithm: str | None = None,
) -> dict[str, Any]:
    """Decode `token` and return its payload.

    Unless `no_verify` is set, the signature is checked and then the `nbf`
    and `exp` claims are enforced against the current time. `no_verify=True`
    trusts the token completely: never use it on untrusted input.

    With no explicit `algorithm`, a key containing a PEM public key marker
    selects RS256; otherwise the header's `alg` is used.

    An explicit `algorithm` always wins: forcing `"RS256"` with a secret that
    is not PEM key material raises `InvalidKeyError` rather than
    `SignatureInvalidError`. Either way the token is rejected.
    """

    if not token:
        raise MissingTokenError("No token supplied")
    if isinstance(token, (bytes, bytearray)):
        try:
            token = bytes(token).decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedTokenError("Invalid token: not ASCII") from e
    elif not token.isascii():
        raise MalformedTokenError("Invalid token: not ASCII")

    segments = token.split(".")
    if len(segments) != 3:
        raise MalformedTokenError("Invalid token: Not enough or too many segments")
    header_segment, payload_segment, signature_segment = segments

    header = _parse_segment(header_segment, name="header")
    payload = _parse_segment(payload_segment, name="payload")

    if no_verify:
        logger.debug("Signature and claim verification skipped (no_verify=True)")
        return payload

    if not key:
        raise MissingKeyError("Key is required to verify a token")

    if algorithm is None and _looks_like_public_key(key):
        logger.debug("Public key material supplied; verifying as RS256")
        algorithm = "RS256"
    alg = get_algorithm(algorithm if algorithm is not None else header.get("alg"))

    signing_input = f"{header_segment}.{payload_segment}"
    if not signing.verify(signing_input, key, alg, signature_segment):
        raise SignatureInvalidError("Signature verification failed")

    now = time.time()
    nbf = payload.get("nbf")
    if _is_number(nbf) and now < nbf:
        raise TokenNotYetActiveError("Token not yet active")
    exp = payload.get("exp")
    if _is_number(exp) and now > exp:
        raise TokenExpiredError("Token expired")

    return payload
