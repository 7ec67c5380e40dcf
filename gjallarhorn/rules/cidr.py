# ᚾᛖᛏ • Address ranges
"""Helpers for deciding whether an address or CIDR block reaches the internet."""

import ipaddress

# literals some providers accept in place of an address
_ANYWHERE = {"*", "any", "internet"}


def is_public(value: str) -> bool:
    """
    True for an address or CIDR block that includes internet-routable space.

    0.0.0.0/0 and ::/0 are public. Other blocks are public when their network
    address is globally routable. Text that is not an address is not public.
    """
    text = value.strip()
    if text.lower() in _ANYWHERE:
        return True
    try:
        network = ipaddress.ip_network(text, strict=False)
    except ValueError:
        return False
    if network.prefixlen == 0:
        return True
    return network.network_address.is_global
