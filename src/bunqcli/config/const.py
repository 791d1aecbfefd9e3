# src/bunqcli/config/const.py
from __future__ import annotations

API_VERSION: str = "v1"

SANDBOX_BASE_URL: str = f"https://public-api.sandbox.bunq.com/{API_VERSION}"
PRODUCTION_BASE_URL: str = f"https://api.bunq.com/{API_VERSION}"

# fixed header values expected by the API
LANGUAGE: str = "en_US"
REGION: str = "en_US"
GEOLOCATION: str = "0 0 0 0 000"

DEVICE_DESCRIPTION: str = "bunq-cli"
PERMITTED_IPS: tuple[str, ...] = ("*",)

RSA_KEY_BITS: int = 2048

DEFAULT_HOME_DIRNAME: str = ".bunq-cli"
CREDENTIALS_FILENAME: str = "credentials.json"
KEYRING_SERVICE_NAME: str = "bunq-cli"
KEYRING_USERNAME: str = "credentials"
DEFAULT_TIMEOUT: float = 30.0
