"""Error formatting and actionable hints for jwtkit CLI output.

Keep this module small and dependency-light: it is imported by the CLI layer
and only depends on the error hierarchy.
"""

from __future__ import annotations

from jwtkit.algorithms import ALGORITHMS
from jwtkit.errors import (
    InvalidKeyError,
    JWTConfigError,
    MalformedTokenError,
    MissingKeyError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenNotYetActiveError,
    UnsupportedAlgorithmError,
)


def format_hint(exc: BaseException) -> str | None:
    """Return an actionable hint for a known error, or None."""
    msg = str(exc)

    if isinstance(exc, JWTConfigError):
        if msg.startswith(("No key", "Could not read key")):
            return "pass --key, --key-file or --key-env, or set [keys] in jwtkit.toml"
        return "jwtkit.toml needs `version = 1` plus optional [encode] and [keys] tables"

    if isinstance(exc, MissingKeyError):
        return "pass --key, --key-file or --key-env"

    if isinstance(exc, UnsupportedAlgorithmError):
        return f"use one of: {', '.join(ALGORITHMS)}"

    if isinstance(exc, InvalidKeyError):
        return "RS256 needs a PEM private key to encode and a PEM public key to decode"

    if isinstance(exc, MalformedTokenError):
        return "check that the token was copied whole (three dot-separated segments)"

    if isinstance(exc, SignatureInvalidError):
        return "the key or algorithm does not match the one the token was signed with"

    if isinstance(exc, TokenExpiredError):
        return "the token's exp claim has passed; issue a new token"

    if isinstance(exc, TokenNotYetActiveError):
        return "the token's nbf claim is in the future; check clock skew"

    if isinstance(exc, KeyError) and exc.args:
        name = exc.args[0]
        if isinstance(name, str) and name:
            return "export the variable in your shell or pass --key-file instead"

    return None


def format_error_with_hint(exc: BaseException) -> str:
    """Format error message + optional hint for stderr output."""
    # Special KeyError formatting (env var names).
    if isinstance(exc, KeyError) and exc.args:
        name = exc.args[0]
        if isinstance(name, str) and name:
            msg = f"missing environment variable {name}"
        else:
            msg = (str(exc) or repr(exc)).strip()
    else:
        msg = (str(exc) or repr(exc)).strip()

    result = f"error: {msg}"
    hint = format_hint(exc)
    if hint:
        result += f"\nhint: {hint}"
    return result
