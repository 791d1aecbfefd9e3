from __future__ import annotations

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from bunqcli.services.auth import Field, MemoryCredentialStore, ensure_key_pair


def test_ensure_key_pair_generates_and_persists_once():
    store = MemoryCredentialStore()
    pair = ensure_key_pair(store)

    assert store.read_field(Field.PRIVATE_KEY) == pair.private_key
    assert store.read_field(Field.PUBLIC_KEY) == pair.public_key
    key = serialization.load_pem_private_key(pair.private_key.encode(), password=None)
    assert isinstance(key, rsa.RSAPrivateKey)
    assert key.key_size >= 2048
    assert pair.public_key.startswith("-----BEGIN PUBLIC KEY-----")

    again = ensure_key_pair(store)
    assert again == pair


def test_existing_key_pair_is_returned_unchanged(key_pair):
    store = MemoryCredentialStore({"private_key": key_pair.private_key, "public_key": key_pair.public_key})
    assert ensure_key_pair(store) == key_pair


def test_half_a_key_pair_is_replaced(key_pair):
    store = MemoryCredentialStore({"private_key": key_pair.private_key})
    pair = ensure_key_pair(store)
    assert pair.private_key != key_pair.private_key
    assert store.read_field(Field.PUBLIC_KEY) == pair.public_key
