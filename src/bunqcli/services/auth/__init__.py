"""Credential lifecycle and signed-request dispatch for the bunq API."""
from .client import BunqHttpClient
from .credentials import Credentials, Environment, Field, HandshakeState, ROTATION_FIELDS
from .envelope import (
    IdEntry,
    ObjectEntry,
    PrincipalEntry,
    PrincipalKind,
    ResponseEnvelope,
    ServerPublicKeyEntry,
    TokenEntry,
    decode_envelope,
)
from .errors import BunqError, ConfigurationError, HttpStatusError, ProtocolError, TransportError
from .handshake import HandshakeController
from .keypair import KeyPair, ensure_key_pair
from .signer import serialize_body, sign, signing_string
from .store import CredentialStore, JsonFileCredentialStore, KeyringCredentialStore, MemoryCredentialStore

__all__ = [
    "BunqHttpClient",
    "Credentials",
    "Environment",
    "Field",
    "HandshakeState",
    "ROTATION_FIELDS",
    "IdEntry",
    "ObjectEntry",
    "PrincipalEntry",
    "PrincipalKind",
    "ResponseEnvelope",
    "ServerPublicKeyEntry",
    "TokenEntry",
    "decode_envelope",
    "BunqError",
    "ConfigurationError",
    "HttpStatusError",
    "ProtocolError",
    "TransportError",
    "HandshakeController",
    "KeyPair",
    "ensure_key_pair",
    "serialize_body",
    "sign",
    "signing_string",
    "CredentialStore",
    "JsonFileCredentialStore",
    "KeyringCredentialStore",
    "MemoryCredentialStore",
]
