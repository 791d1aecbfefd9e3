from __future__ import annotations

import logging
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from bunqcli.config.const import RSA_KEY_BITS

from .credentials import Field
from .store import CredentialStore

__all__ = ["KeyPair", "generate_rsa_key", "private_key_pem", "public_key_pem", "ensure_key_pair"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class KeyPair:
    private_key: str
    public_key: str


def generate_rsa_key(bits: int = RSA_KEY_BITS) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=bits)


def private_key_pem(key: rsa.RSAPrivateKey) -> str:
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return pem.decode("ascii")


def public_key_pem(key: rsa.RSAPrivateKey) -> str:
    pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return pem.decode("ascii")


def ensure_key_pair(store: CredentialStore, *, bits: int = RSA_KEY_BITS) -> KeyPair:
    """Return the stored key pair, generating and persisting one if either half is missing."""
    snapshot = store.load()
    if snapshot.private_key and snapshot.public_key:
        return KeyPair(private_key=snapshot.private_key, public_key=snapshot.public_key)

    logger.info("Generating %d-bit RSA key pair", bits)
    key = generate_rsa_key(bits)
    pair = KeyPair(private_key=private_key_pem(key), public_key=public_key_pem(key))
    store.write_fields({Field.PRIVATE_KEY: pair.private_key, Field.PUBLIC_KEY: pair.public_key})
    return pair
