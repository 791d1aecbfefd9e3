"""Canonical request signing.

Every request after installation carries ``X-Bunq-Client-Signature``: a
base64 RSA PKCS#1 v1.5 / SHA-256 signature over::

    <METHOD> /v1<path>\\n\\n<body>

where ``<body>`` is byte-for-byte the JSON text sent on the wire.
"""
from __future__ import annotations

import base64
import json
import logging
from typing import Any

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from bunqcli.config.const import API_VERSION

__all__ = ["serialize_body", "signing_string", "sign"]

logger = logging.getLogger(__name__)


def serialize_body(body: Any | None) -> str:
    """Compact JSON identical to what ``JSON.stringify`` would emit."""
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    return json.dumps(body, ensure_ascii=False, separators=(",", ":"))


def signing_string(method: str, path: str, body: str | None) -> str:
    return f"{method.upper()} /{API_VERSION}{path}\n\n{body or ''}"


def sign(method: str, path: str, body: str | None, private_key: str | None) -> str | None:
    """Sign a request, or return ``None`` when no usable key is available."""
    if not private_key:
        return None
    try:
        key = serialization.load_pem_private_key(private_key.encode("ascii"), password=None)
        if not isinstance(key, rsa.RSAPrivateKey):
            logger.debug("Stored private key is not RSA; request goes unsigned")
            return None
        payload = signing_string(method, path, body).encode("utf-8")
        signature = key.sign(payload, padding.PKCS1v15(), hashes.SHA256())
    except Exception as exc:
        logger.debug("Request signing failed; request goes unsigned: %s", exc)
        return None
    return base64.b64encode(signature).decode("ascii")
