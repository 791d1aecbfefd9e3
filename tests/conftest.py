from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from bunqcli.services.auth import BunqHttpClient, HandshakeController, KeyPair, MemoryCredentialStore
from bunqcli.services.auth.keypair import generate_rsa_key, private_key_pem, public_key_pem


@dataclass
class FakeBunq:
    """Canned bunq API: queue responses per ``(method, path)`` and record every request."""

    responses: dict[tuple[str, str], list[httpx.Response]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add(self, method: str, path: str, status_code: int = 200, payload: Any | None = None) -> None:
        response = httpx.Response(status_code, json=payload) if payload is not None else httpx.Response(status_code)
        self.responses.setdefault((method.upper(), f"/v1{path}"), []).append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.responses.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"Error": [{"error_description": f"no route {request.url.path}"}]})
        return queue.pop(0)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def body(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return generate_rsa_key()


@pytest.fixture(scope="session")
def key_pair(rsa_key) -> KeyPair:
    return KeyPair(private_key=private_key_pem(rsa_key), public_key=public_key_pem(rsa_key))


@pytest.fixture()
def fake_bunq() -> FakeBunq:
    return FakeBunq()


@pytest.fixture()
def store() -> MemoryCredentialStore:
    return MemoryCredentialStore({"secret": "api-key-123", "environment": "sandbox"})


@pytest.fixture()
def http(store, fake_bunq) -> BunqHttpClient:
    return BunqHttpClient(store=store, transport=fake_bunq.transport)


@pytest.fixture()
def controller(store, http) -> HandshakeController:
    return HandshakeController(store=store, http=http)
