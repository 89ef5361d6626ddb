# tests/services/test_identity.py
"""Tests for voter identity resolution."""

import pytest

from slapboard.services.identity import IdentityResolver, VoterIdentity, normalize_ip

TRUST_ORDER = ["cf-connecting-ip", "x-real-ip", "x-forwarded-for"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("::ffff:192.168.1.10", "192.168.1.10"),
        ("::1", "127.0.0.1"),
        ("  203.0.113.9  ", "203.0.113.9"),
        ("2001:0db8:0000:0000:0000:0000:0000:0001", "2001:db8::1"),
        ("", "127.0.0.1"),
        (None, "127.0.0.1"),
        ("not-an-ip", "not-an-ip"),
    ],
)
def test_normalize_ip(raw, expected) -> None:
    assert normalize_ip(raw) == expected


def test_cf_header_wins_over_forwarded_for() -> None:
    resolver = IdentityResolver(trusted_headers=TRUST_ORDER)
    headers = {
        "X-Forwarded-For": "198.51.100.1",
        "CF-Connecting-IP": "203.0.113.5",
        "X-Real-IP": "192.0.2.7",
    }
    assert resolver.resolve_address(headers, "10.0.0.1") == "203.0.113.5"


def test_forwarded_for_uses_first_hop() -> None:
    resolver = IdentityResolver(trusted_headers=TRUST_ORDER)
    headers = {"x-forwarded-for": "198.51.100.1, 10.0.0.2, 10.0.0.3"}
    assert resolver.resolve_address(headers, "10.0.0.1") == "198.51.100.1"


def test_falls_back_to_socket_then_loopback() -> None:
    resolver = IdentityResolver(trusted_headers=TRUST_ORDER)
    assert resolver.resolve_address({}, "::ffff:10.1.2.3") == "10.1.2.3"
    assert resolver.resolve_address({}, None) == "127.0.0.1"


def test_untrusted_headers_are_ignored() -> None:
    resolver = IdentityResolver(trusted_headers=["x-real-ip"])
    headers = {"X-Forwarded-For": "198.51.100.1"}
    assert resolver.resolve_address(headers, "192.0.2.1") == "192.0.2.1"


def test_existing_device_cookie_is_reused() -> None:
    resolver = IdentityResolver(trusted_headers=TRUST_ORDER, cookie_name="device_id")
    voter = resolver.resolve({}, "192.0.2.1", {"device_id": "abc123"})
    assert voter.device_id == "abc123"
    assert voter.minted is False


@pytest.mark.parametrize("cookie", ["x" * 65, "not a token", "semi;colon"])
def test_malformed_device_cookie_is_replaced(cookie) -> None:
    resolver = IdentityResolver(trusted_headers=TRUST_ORDER, cookie_name="device_id")
    voter = resolver.resolve({}, "192.0.2.1", {"device_id": cookie})
    assert voter.minted is True
    assert voter.device_id != cookie


def test_missing_device_cookie_mints_token() -> None:
    resolver = IdentityResolver(trusted_headers=TRUST_ORDER)
    first = resolver.resolve({}, "192.0.2.1")
    second = resolver.resolve({}, "192.0.2.1")
    assert first.minted is True
    assert first.device_id
    assert first.device_id != second.device_id


def test_key_is_address_unless_device_included() -> None:
    assert VoterIdentity("192.0.2.1", "dev").key == "192.0.2.1"
    assert VoterIdentity("192.0.2.1", "dev", include_device=True).key == "192.0.2.1|dev"
    assert VoterIdentity("192.0.2.1", None, include_device=True).key == "192.0.2.1"


def test_resolver_applies_include_device_flag() -> None:
    resolver = IdentityResolver(trusted_headers=TRUST_ORDER, include_device=True)
    voter = resolver.resolve({}, "192.0.2.1", {"device_id": "dev-1"})
    assert voter.key == "192.0.2.1|dev-1"
