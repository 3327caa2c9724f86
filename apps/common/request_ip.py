"""
Secure client IP detection for EMall

Respects the IPWARE_TRUSTED_PROXY_LIST setting so forwarded headers are only
honoured when the direct peer is a trusted load balancer. Used for throttling
keys and security event logging.
"""

import ipaddress

from django.conf import settings
from django.http import HttpRequest


def _is_valid_ip(ip: str) -> bool:
    """Check if a string is a valid IP address."""
    try:
        ipaddress.ip_address(ip)
        return True
    except ValueError:
        return False


def _is_trusted_proxy(ip: str, trusted_proxies: list[str]) -> bool:
    """Check if an IP address is in the trusted proxy list (supports CIDR)."""
    if not trusted_proxies or not _is_valid_ip(ip):
        return False

    ip_addr = ipaddress.ip_address(ip)
    for proxy in trusted_proxies:
        try:
            if ip_addr in ipaddress.ip_network(proxy, strict=False):
                return True
        except ValueError:
            continue
    return False


def get_safe_client_ip(request: HttpRequest) -> str:
    """
    Get the real client IP address, respecting proxy trust configuration.

    - Dev/Local: [] (trust no proxy headers, REMOTE_ADDR only)
    - Prod: ['10.0.0.0/8'] (only trust your LB/proxy CIDRs)
    """
    trusted_proxies = getattr(settings, 'IPWARE_TRUSTED_PROXY_LIST', [])
    remote_addr = request.META.get('REMOTE_ADDR', '127.0.0.1') or '127.0.0.1'

    if not _is_trusted_proxy(remote_addr, trusted_proxies):
        return remote_addr

    for header in ('HTTP_X_FORWARDED_FOR', 'HTTP_X_REAL_IP'):
        value = request.META.get(header)
        if value:
            client_ip = value.split(',')[0].strip()
            if _is_valid_ip(client_ip):
                return client_ip

    return remote_addr
