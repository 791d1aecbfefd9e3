from __future__ import annotations

import pytest

from bunqcli.services.auth import (
    IdEntry,
    ObjectEntry,
    PrincipalKind,
    ProtocolError,
    ServerPublicKeyEntry,
    TokenEntry,
    decode_envelope,
)


def test_installation_envelope():
    envelope = decode_envelope(
        {
            "Response": [
                {"Id": {"id": 7}},
                {"Token": {"id": 9, "token": "abc", "created": "2024-01-01 00:00:00.000000"}},
                {"ServerPublicKey": {"server_public_key": "pk"}},
            ]
        }
    )
    assert envelope.token() == "abc"
    assert envelope.server_public_key() == "pk"
    assert envelope.first(IdEntry) == IdEntry(id=7)
    assert envelope.first(TokenEntry) == TokenEntry(token="abc", id=9)
    assert isinstance(envelope.entries[2], ServerPublicKeyEntry)


@pytest.mark.parametrize("kind", ["UserPerson", "UserCompany", "UserApiKey"])
def test_principal_kinds(kind):
    envelope = decode_envelope({"Response": [{"Token": {"token": "T2"}}, {kind: {"id": 42, "display_name": "X"}}]})
    principal = envelope.principal()
    assert principal is not None
    assert principal.kind is PrincipalKind(kind)
    assert principal.id == "42"
    assert principal.payload["display_name"] == "X"


def test_principal_without_id_decodes_with_none():
    envelope = decode_envelope({"Response": [{"Token": {"token": "T2"}}, {"UserApiKey": {"requested_by_user": {}}}]})
    principal = envelope.principal()
    assert principal is not None
    assert principal.kind is PrincipalKind.USER_API_KEY
    assert principal.id is None
    assert principal.payload == {"requested_by_user": {}}


def test_unknown_kinds_are_kept_as_objects():
    payload = {
        "Response": [
            {"MonetaryAccountBank": {"id": 1, "description": "Main"}},
            {"MonetaryAccountBank": {"id": 2, "description": "Savings"}},
        ],
        "Pagination": {"future_url": None, "newer_url": None, "older_url": None},
    }
    envelope = decode_envelope(payload)
    assert [item["id"] for item in envelope.objects("MonetaryAccountBank")] == [1, 2]
    assert envelope.objects("Payment") == []
    assert isinstance(envelope.entries[0], ObjectEntry)
    assert envelope.pagination == payload["Pagination"]
    assert envelope.token() is None
    assert envelope.principal() is None
    assert envelope.raw == payload


def test_empty_body_is_empty_envelope():
    envelope = decode_envelope(None)
    assert envelope.entries == ()
    assert envelope.token() is None


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"Error": []},
        {"Response": {"Token": {"token": "x"}}},
        {"Response": [{"Token": {"token": "x"}, "ServerPublicKey": {"server_public_key": "pk"}}]},
        {"Response": ["Token"]},
        {"Response": [{"Token": {}}]},
        {"Response": [{"Token": "abc"}]},
    ],
)
def test_malformed_envelopes_raise(payload):
    with pytest.raises(ProtocolError):
        decode_envelope(payload)
