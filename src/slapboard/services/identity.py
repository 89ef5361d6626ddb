# src/slapboard/services/identity.py
"""Voter identity resolution for anonymous requests."""

from __future__ import annotations

import ipaddress
import re
import secrets
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from slapboard.core.settings import settings

LOOPBACK_PLACEHOLDER = "127.0.0.1"
MAX_ADDRESS_LENGTH = 45
DEVICE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


@dataclass(frozen=True)
class VoterIdentity:
    """Best-effort identity of an anonymous requester."""

    address: str
    device_id: str | None = None
    # True when the device token was issued on this request and must be persisted.
    minted: bool = False
    include_device: bool = False

    @property
    def key(self) -> str:
        """Return the string used for duplicate-vote detection."""
        if self.include_device and self.device_id:
            return f"{self.address}|{self.device_id}"
        return self.address


def normalize_ip(value: str | None) -> str:
    """Return a canonical form of a client address.

    IPv4-mapped IPv6 addresses collapse to their IPv4 form and the IPv6
    loopback becomes ``127.0.0.1``. Values that do not parse are returned
    stripped rather than rejected.
    """
    if value is None:
        return LOOPBACK_PLACEHOLDER
    candidate = value.strip()
    if not candidate:
        return LOOPBACK_PLACEHOLDER

    try:
        parsed = ipaddress.ip_address(candidate)
    except ValueError:
        return candidate[:MAX_ADDRESS_LENGTH]

    if isinstance(parsed, ipaddress.IPv6Address):
        if parsed.ipv4_mapped is not None:
            return str(parsed.ipv4_mapped)
        if parsed.is_loopback:
            return LOOPBACK_PLACEHOLDER
    return str(parsed)


def mint_device_id() -> str:
    """Return a new random, URL-safe device token."""
    return secrets.token_urlsafe(16)


class IdentityResolver:
    """Derive a stable voter identity from request metadata."""

    def __init__(
        self,
        trusted_headers: Sequence[str] | None = None,
        cookie_name: str | None = None,
        include_device: bool | None = None,
    ) -> None:
        headers = trusted_headers if trusted_headers is not None else settings.trusted_ip_headers
        self._trusted_headers = [header.lower() for header in headers]
        self.cookie_name = cookie_name or settings.device_cookie_name
        self._include_device = (
            settings.identity_include_device if include_device is None else include_device
        )

    def resolve_address(self, headers: Mapping[str, str], client_host: str | None) -> str:
        """Return the client address honouring the configured header trust order."""
        lowered = {name.lower(): value for name, value in headers.items()}
        for header in self._trusted_headers:
            raw = lowered.get(header)
            if not raw:
                continue
            # Proxies append to X-Forwarded-For; the first hop is the client.
            first = raw.split(",")[0].strip()
            if first:
                return normalize_ip(first)
        return normalize_ip(client_host)

    def resolve(
        self,
        headers: Mapping[str, str],
        client_host: str | None,
        cookies: Mapping[str, str] | None = None,
    ) -> VoterIdentity:
        """Resolve the full identity, minting a device token when none is present."""
        address = self.resolve_address(headers, client_host)
        device_id = (cookies or {}).get(self.cookie_name) or None
        minted = False
        # Tokens we could not have issued are replaced rather than trusted.
        if device_id is None or not DEVICE_ID_PATTERN.match(device_id):
            device_id = mint_device_id()
            minted = True
        return VoterIdentity(
            address=address,
            device_id=device_id,
            minted=minted,
            include_device=self._include_device,
        )
