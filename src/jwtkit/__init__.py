from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from jwtkit.algorithms import ALGORITHMS, Algorithm, SigningKind, get_algorithm
from jwtkit.codec import decode, encode, get_unverified_header, merge_headers
from jwtkit.errors import (
    AlgorithmTypeUnrecognizedError,
    InvalidKeyError,
    JWTConfigError,
    JWTError,
    MalformedEncodingError,
    MalformedTokenError,
    MissingKeyError,
    MissingTokenError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenNotYetActiveError,
    UnsupportedAlgorithmError,
)


def _package_version() -> str:
    try:
        return version("jwtkit")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "ALGORITHMS",
    "Algorithm",
    "AlgorithmTypeUnrecognizedError",
    "InvalidKeyError",
    "JWTConfigError",
    "JWTError",
    "MalformedEncodingError",
    "MalformedTokenError",
    "MissingKeyError",
    "MissingTokenError",
    "SignatureInvalidError",
    "SigningKind",
    "TokenExpiredError",
    "TokenNotYetActiveError",
    "UnsupportedAlgorithmError",
    "__version__",
    "decode",
    "encode",
    "get_algorithm",
    "get_unverified_header",
    "merge_headers",
]
