"""Installation, device registration and session creation against the bunq API.

The handshake has three strictly ordered steps::

    POST /installation     -> installation token (+ server public key)
    POST /device-server    -> registers this installation for the API key
    POST /session-server   -> session token (+ the authenticated user)

Each step requires the credential produced by the previous one, so calling
them out of order fails locally with :class:`ConfigurationError` before any
network traffic happens.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from bunqcli.config.const import DEVICE_DESCRIPTION, PERMITTED_IPS

from .client import BunqHttpClient
from .credentials import Credentials, Field, HandshakeState
from .errors import ConfigurationError, ProtocolError
from .keypair import ensure_key_pair
from .store import CredentialStore

__all__ = ["HandshakeController"]

logger = logging.getLogger(__name__)

INSTALLATION_PATH = "/installation"
DEVICE_SERVER_PATH = "/device-server"
SESSION_SERVER_PATH = "/session-server"


@dataclass
class HandshakeController:
    store: CredentialStore
    http: BunqHttpClient
    device_description: str = DEVICE_DESCRIPTION
    permitted_ips: Sequence[str] = PERMITTED_IPS
    credentials: Credentials = field(init=False)
    state: HandshakeState = field(init=False)

    def __post_init__(self) -> None:
        self.credentials = self.store.load()
        self.state = self.credentials.state

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _reload(self) -> Credentials:
        self.credentials = self.store.load()
        return self.credentials

    def _persist(self, values: dict[Field, str]) -> None:
        self.store.write_fields(values)
        for name, value in values.items():
            setattr(self.credentials, name.value, value)

    def _require_secret(self) -> str:
        secret = self._reload().secret
        if not secret:
            raise ConfigurationError("No API key configured. Run: bunq config set --api-key <key>")
        return secret

    def _require_installation_token(self) -> str:
        token = self.credentials.installation_token
        if not token:
            raise ConfigurationError("No installation token found. Run: bunq auth setup")
        return token

    # ------------------------------------------------------------------
    # handshake steps
    # ------------------------------------------------------------------
    def install(self) -> str:
        """Register the public key and store the installation token."""
        self._require_secret()
        pair = ensure_key_pair(self.store)
        self._reload()

        logger.info("Registering installation (%s)", self.credentials.environment)
        envelope = self.http.request(
            "POST",
            INSTALLATION_PATH,
            {"client_public_key": pair.public_key},
            anonymous=True,
            sign=False,
        )
        token = envelope.token()
        if not token:
            raise ProtocolError("Failed to obtain installation token from response.")

        values = {Field.INSTALLATION_TOKEN: token}
        server_public_key = envelope.server_public_key()
        if server_public_key:
            values[Field.SERVER_PUBLIC_KEY] = server_public_key
        # a session bound to a previous installation is no longer valid
        self.store.delete_fields([Field.SESSION_TOKEN, Field.USER_ID])
        self.credentials.session_token = None
        self.credentials.user_id = None
        self._persist(values)
        self.state = HandshakeState.INSTALLED
        return token

    def register_device(self) -> None:
        """Declare this installation as a device server for the API key."""
        secret = self._require_secret()
        token = self._require_installation_token()
        if not self.credentials.has_key_pair:
            # accepted by the client; whether the API accepts it depends on the environment
            logger.warning("No key pair held; device registration will be sent unsigned")

        logger.info("Registering device server '%s'", self.device_description)
        self.http.request(
            "POST",
            DEVICE_SERVER_PATH,
            {
                "description": self.device_description,
                "secret": secret,
                "permitted_ips": list(self.permitted_ips),
            },
            token=token,
        )
        self.state = HandshakeState.DEVICE_REGISTERED

    def create_session(self) -> str:
        """Open a session with the installation token and store the session token."""
        secret = self._require_secret()
        token = self._require_installation_token()

        logger.info("Creating session")
        envelope = self.http.request("POST", SESSION_SERVER_PATH, {"secret": secret}, token=token)
        session_token = envelope.token()
        if not session_token:
            raise ProtocolError("Failed to obtain session token from response.")

        values = {Field.SESSION_TOKEN: session_token}
        principal = envelope.principal()
        if principal is not None and principal.id:
            values[Field.USER_ID] = principal.id
        self._persist(values)
        self.state = HandshakeState.SESSION_ACTIVE
        logger.info("Session active%s", f" for user {principal.id}" if principal and principal.id else "")
        return session_token

    # ------------------------------------------------------------------
    # composite flows
    # ------------------------------------------------------------------
    def full_setup(self) -> Credentials:
        self.install()
        self.register_device()
        self.create_session()
        return self.credentials

    def refresh_session(self) -> Credentials:
        self._require_secret()
        if not self.credentials.installation_token:
            logger.info("No installation found; running full setup")
            return self.full_setup()
        self.create_session()
        return self.credentials

    def require_session(self) -> Credentials:
        credentials = self._reload()
        if not credentials.session_token:
            raise ConfigurationError("Not authenticated. Run: bunq auth setup")
        return credentials
