# src/bunqcli/services/auth/client.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from bunqcli import __version__
from bunqcli.config.const import DEFAULT_TIMEOUT, GEOLOCATION, LANGUAGE, REGION

from .credentials import Credentials
from .envelope import ResponseEnvelope, decode_envelope
from .errors import HttpStatusError, ProtocolError, TransportError
from .signer import serialize_body, sign
from .store import CredentialStore

__all__ = ["BunqHttpClient", "build_headers"]

logger = logging.getLogger(__name__)

HEADER_REQUEST_ID = "X-Bunq-Client-Request-Id"
HEADER_AUTHENTICATION = "X-Bunq-Client-Authentication"
HEADER_SIGNATURE = "X-Bunq-Client-Signature"


def _select_token(credentials: Credentials, explicit: str | None, anonymous: bool) -> str | None:
    if anonymous:
        return None
    return explicit or credentials.session_token or credentials.installation_token


def build_headers(
    method: str,
    path: str,
    body_text: str,
    credentials: Credentials,
    *,
    token: str | None = None,
    anonymous: bool = False,
    sign_request: bool = True,
) -> dict[str, str]:
    """Compose the transport headers for one call from a credential snapshot."""
    headers = {
        "Content-Type": "application/json",
        "Cache-Control": "no-cache",
        "User-Agent": f"bunq-cli/{__version__}",
        "X-Bunq-Language": LANGUAGE,
        "X-Bunq-Region": REGION,
        HEADER_REQUEST_ID: str(uuid.uuid4()),
        "X-Bunq-Geolocation": GEOLOCATION,
    }
    auth_token = _select_token(credentials, token, anonymous)
    if auth_token:
        headers[HEADER_AUTHENTICATION] = auth_token
    if sign_request and credentials.private_key:
        signature = sign(method, path, body_text, credentials.private_key)
        if signature:
            headers[HEADER_SIGNATURE] = signature
    return headers


def _error_message(status_code: int, content: Any, fallback: str) -> str:
    # bunq errors look like {"Error": [{"error_description": "...", ...}]}
    if isinstance(content, Mapping):
        errors = content.get("Error")
        if isinstance(errors, list):
            descriptions = [
                str(item.get("error_description"))
                for item in errors
                if isinstance(item, Mapping) and item.get("error_description")
            ]
            if descriptions:
                return "; ".join(descriptions)
    return fallback or f"HTTP {status_code}"


@dataclass(slots=True)
class BunqHttpClient:
    """Signed-request dispatcher for the bunq API.

    Every call reads one consistent snapshot of the credential store, picks
    the authentication token, signs the exact body bytes and sends them to
    the endpoint of the configured environment.  Failures are raised, never
    retried.
    """

    store: CredentialStore
    timeout: float = DEFAULT_TIMEOUT
    transport: httpx.BaseTransport | None = None

    def request(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        *,
        token: str | None = None,
        anonymous: bool = False,
        sign: bool = True,
    ) -> ResponseEnvelope:
        method = method.upper()
        credentials = self.store.load()
        body_text = serialize_body(body)
        headers = build_headers(
            method,
            path,
            body_text,
            credentials,
            token=token,
            anonymous=anonymous,
            sign_request=sign,
        )
        base_url = credentials.environment.base_url
        logger.debug(
            "%s %s%s (request id %s, signed=%s, authenticated=%s)",
            method,
            base_url,
            path,
            headers[HEADER_REQUEST_ID],
            HEADER_SIGNATURE in headers,
            HEADER_AUTHENTICATION in headers,
        )

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(
                    method,
                    f"{base_url}{path}",
                    content=body_text.encode("utf-8") if body_text else None,
                    headers=headers,
                )
        except httpx.RequestError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        content: Any | None = None
        if response.content:
            try:
                content = response.json()
            except ValueError:
                content = response.text

        if not response.is_success:
            message = _error_message(response.status_code, content, response.text)
            logger.debug("%s %s rejected with HTTP %s", method, path, response.status_code)
            raise HttpStatusError(message, status_code=response.status_code, payload=content)

        if isinstance(content, str):
            raise ProtocolError(f"{method} {path} returned a non-JSON body")
        return decode_envelope(content)

    def get(self, path: str) -> ResponseEnvelope:
        return self.request("GET", path)

    def post(self, path: str, body: Any | None = None, *, token: str | None = None) -> ResponseEnvelope:
        return self.request("POST", path, body, token=token)

    def put(self, path: str, body: Any | None = None) -> ResponseEnvelope:
        return self.request("PUT", path, body)

    def delete(self, path: str) -> ResponseEnvelope:
        return self.request("DELETE", path)
