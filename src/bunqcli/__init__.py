"""bunq-cli: a signed-request client for the bunq API."""

__version__ = "0.1.0"
