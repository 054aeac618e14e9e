"""jwtkit exception hierarchy.

Keep this module small and dependency-free: it is imported by every other
module and by tests.
"""


class JWTError(Exception):
    """Base exception for all jwtkit errors."""


class JWTConfigError(JWTError):
    """Raised for invalid `jwtkit.toml` content or CLI key sources."""


class MissingTokenError(JWTError, ValueError):
    """Raised when decode is called without a token."""


class MissingKeyError(JWTError, ValueError):
    """Raised when a key is required but absent or empty."""


class InvalidKeyError(JWTError, ValueError):
    """Raised when PEM key material cannot be loaded for the algorithm."""


class MalformedTokenError(JWTError, ValueError):
    """Raised when a token is not three decodable JSON/base64url segments."""


class MalformedEncodingError(JWTError, ValueError):
    """Raised when base64url text has invalid characters or padding."""


class UnsupportedAlgorithmError(JWTError, ValueError):
    """Raised for algorithm names outside the supported table."""


class AlgorithmTypeUnrecognizedError(JWTError):
    """Raised when signing dispatch meets an algorithm kind it cannot handle."""


class SignatureInvalidError(JWTError):
    """Raised when a token signature does not verify."""


class TokenNotYetActiveError(JWTError):
    """Raised when the current time is before the token's ``nbf`` claim."""


class TokenExpiredError(JWTError):
    """Raised when the current time is after the token's ``exp`` claim."""
