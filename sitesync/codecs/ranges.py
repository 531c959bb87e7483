"""Range codec: textual IPv4 notations to inclusive ``(first, last)`` pairs.

Accepted notations::

    10.0.0.5                  single address
    10.0.0.1 - 10.0.0.9       dash range (spaced)
    10.0.0.1-10.0.0.9         dash range (bare)
    192.168.1.0/30            CIDR block, network and broadcast included
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from ipaddress import IPv4Address


class InvalidAddressError(ValueError):
    """Raised when a range side is not a valid IPv4 address or block."""


@dataclass(frozen=True)
class CanonicalRange:
    """Inclusive address range. ``last is None`` marks a bare single-host entry."""

    first: IPv4Address
    last: IPv4Address | None = None

    @property
    def is_single(self) -> bool:
        return self.last is None or self.last == self.first


def decode(raw: str) -> CanonicalRange:
    """Parse *raw* into a :class:`CanonicalRange`.

    Callers skip empty cells; an empty string here is an error.
    """
    text = raw.strip()
    if "-" in text:
        parts = text.split(" - ") if " - " in text else text.split("-")
        if len(parts) != 2:
            raise InvalidAddressError(f"malformed range: {raw!r}")
        first = _parse_address(parts[0])
        last = _parse_address(parts[1])
        if int(last) < int(first):
            raise InvalidAddressError(f"range end precedes start: {raw!r}")
        return CanonicalRange(first, last)

    try:
        network = ipaddress.IPv4Network(text, strict=False)
    except ValueError as exc:
        raise InvalidAddressError(f"invalid IPv4 address or block: {raw!r}") from exc
    return CanonicalRange(network.network_address, network.broadcast_address)


def encode(rng: CanonicalRange) -> str:
    if rng.is_single:
        return str(rng.first)
    return f"{rng.first} - {rng.last}"


def count(rng: CanonicalRange) -> int:
    """Number of addresses covered, inclusive of both ends."""
    if rng.last is None:
        return 1
    return int(rng.last) - int(rng.first) + 1


def _parse_address(text: str) -> IPv4Address:
    try:
        return IPv4Address(text.strip())
    except ValueError as exc:
        raise InvalidAddressError(f"invalid IPv4 address: {text.strip()!r}") from exc
