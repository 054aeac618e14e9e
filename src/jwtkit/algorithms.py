"""The fixed table of supported signing algorithms.

Every other module resolves algorithm names through `get_algorithm`; a name
missing from `ALGORITHMS` is unsupported everywhere.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from jwtkit.errors import UnsupportedAlgorithmError


class SigningKind(Enum):
    MAC = "mac"
    ASYMMETRIC = "asymmetric"


@dataclass(frozen=True, slots=True)
class Algorithm:
    name: str
    hash_name: str
    kind: SigningKind


ALGORITHMS: Mapping[str, Algorithm] = MappingProxyType(
    {
        "HS256": Algorithm("HS256", "sha256", SigningKind.MAC),
        "HS384": Algorithm("HS384", "sha384", SigningKind.MAC),
        "HS512": Algorithm("HS512", "sha512", SigningKind.MAC),
        "RS256": Algorithm("RS256", "sha256", SigningKind.ASYMMETRIC),
    }
)

DEFAULT_ALGORITHM = "HS256"


def get_algorithm(name: object) -> Algorithm:
    """Return the descriptor for `name` (case-sensitive)."""

    if isinstance(name, str):
        alg = ALGORITHMS.get(name)
        if alg is not None:
            return alg
    raise UnsupportedAlgorithmError(f"Algorithm not supported: {name!r}")
