from __future__ import annotations

from dataclasses import dataclass

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


@dataclass(frozen=True)
class RSAKeyPair:
    private_pem: bytes
    public_pem: bytes
    public_pkcs1_pem: bytes


def _generate() -> RSAKeyPair:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    public_key = private_key.public_key()
    return RSAKeyPair(
        private_pem=private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ),
        public_pem=public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ),
        public_pkcs1_pem=public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.PKCS1,
        ),
    )


@pytest.fixture(scope="session")
def rsa_keys() -> RSAKeyPair:
    return _generate()


@pytest.fixture(scope="session")
def other_rsa_keys() -> RSAKeyPair:
    return _generate()
