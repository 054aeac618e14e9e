"""Signature computation and verification, dispatched on algorithm kind.

MAC algorithms use the standard library `hmac` module. RSA signatures go
through `cryptography` (RSASSA-PKCS1-v1_5). Both are reentrant, so these
functions are safe to call from any number of threads.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from cryptography.exceptions import InvalidSignature
from cryptography.exceptions import UnsupportedAlgorithm as _CryptoUnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from jwtkit import base64url
from jwtkit.algorithms import Algorithm, SigningKind
from jwtkit.errors import (
    AlgorithmTypeUnrecognizedError,
    InvalidKeyError,
    MalformedEncodingError,
)

logger = logging.getLogger("jwtkit.signing")

KeyLike = bytes | bytearray | str

_RSA_HASHES: dict[str, type[hashes.HashAlgorithm]] = {
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


def key_bytes(key: KeyLike) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    raise TypeError(f"key must be str or bytes, not {type(key).__name__}")


def _mac_segment(signing_input: str, key: KeyLike, alg: Algorithm) -> str:
    digestmod = getattr(hashlib, alg.hash_name)
    mac = hmac.new(key_bytes(key), signing_input.encode("utf-8"), digestmod)
    return base64url.encode(mac.digest())


def _load_private_key(key: KeyLike) -> rsa.RSAPrivateKey:
    data = key_bytes(key)
    try:
        loaded = serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError, _CryptoUnsupportedAlgorithm) as e:
        raise InvalidKeyError(f"Could not load PEM private key: {e}") from e
    if not isinstance(loaded, rsa.RSAPrivateKey):
        raise InvalidKeyError(f"Expected an RSA private key, got {type(loaded).__name__}")
    return loaded


def _load_public_key(key: KeyLike) -> rsa.RSAPublicKey:
    data = key_bytes(key)
    # Accept a private key too and verify with its public half.
    if b"PRIVATE KEY-----" in data:
        return _load_private_key(data).public_key()
    try:
        loaded = serialization.load_pem_public_key(data)
    except (ValueError, TypeError, _CryptoUnsupportedAlgorithm) as e:
        raise InvalidKeyError(f"Could not load PEM public key: {e}") from e
    if not isinstance(loaded, rsa.RSAPublicKey):
        raise InvalidKeyError(f"Expected an RSA public key, got {type(loaded).__name__}")
    return loaded


def sign(signing_input: str, key: KeyLike, alg: Algorithm) -> str:
    """Return the base64url signature segment for `signing_input`."""

    if alg.kind is SigningKind.MAC:
        return _mac_segment(signing_input, key, alg)
    if alg.kind is SigningKind.ASYMMETRIC:
        private_key = _load_private_key(key)
        signature = private_key.sign(
            signing_input.encode("utf-8"),
            padding.PKCS1v15(),
            _RSA_HASHES[alg.hash_name](),
        )
        return base64url.encode(signature)
    raise AlgorithmTypeUnrecognizedError(f"Algorithm type not recognized: {alg.kind!r}")


def verify(signing_input: str, key: KeyLike, alg: Algorithm, signature_segment: str) -> bool:
    """Return True if `signature_segment` is a valid signature of `signing_input`.

    MAC signatures are recomputed and compared in constant time. RSA
    signatures must also be in canonical base64url form, so no two distinct
    segments verify for the same signature bytes.
    """

    if alg.kind is SigningKind.MAC:
        expected = _mac_segment(signing_input, key, alg)
        return hmac.compare_digest(expected.encode("utf-8"), signature_segment.encode("utf-8"))
    if alg.kind is SigningKind.ASYMMETRIC:
        public_key = _load_public_key(key)
        try:
            signature = base64url.decode(signature_segment)
        except MalformedEncodingError:
            logger.debug("Signature segment is not valid base64url")
            return False
        if base64url.encode(signature) != signature_segment:
            return False
        try:
            public_key.verify(
                signature,
                signing_input.encode("utf-8"),
                padding.PKCS1v15(),
                _RSA_HASHES[alg.hash_name](),
            )
        except InvalidSignature:
            return False
        return True
    raise AlgorithmTypeUnrecognizedError(f"Algorithm type not recognized: {alg.kind!r}")
