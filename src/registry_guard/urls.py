"""URL validation with SSRF protection.

URLs are only validated here, never fetched. The blocked-host tables live in
``config``; literal IP hosts are additionally classified with ``ipaddress``
because ``urllib.parse`` keeps numeric hosts exactly as written, while HTTP
clients will happily resolve ``https://2130706433/`` to ``127.0.0.1``.
"""
import re
import ipaddress
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urlsplit

from .config import (
    BLOCKED_HOSTS,
    BLOCKED_IP_PATTERNS,
    HTTPS_DEFAULT_PORT,
    MAX_URL_LENGTH,
    URL_HTTPS_RE,
)
from .results import ValidationResult

NEWLINE_RE = re.compile(r"[\n\r]")
WHITESPACE_RE = re.compile(r"\s")
CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_IPV4_PART_RE = re.compile(r"0[xX][0-9a-fA-F]*|0[0-7]*|[1-9][0-9]*")

def validate_url_format(url) -> ValidationResult:
    if not isinstance(url, str):
        return ValidationResult.fail("URL must be a string")
    if len(url) > MAX_URL_LENGTH:
        return ValidationResult.fail(f"URL too long: {len(url)} chars (max: {MAX_URL_LENGTH})")
    if NEWLINE_RE.search(url):
        return ValidationResult.fail("URL contains newline characters")
    if WHITESPACE_RE.search(url):
        return ValidationResult.fail("URL contains whitespace")
    if CONTROL_RE.search(url):
        return ValidationResult.fail("URL contains control characters")
    if not URL_HTTPS_RE.fullmatch(url):
        return ValidationResult.fail("URL must start with https:// and be properly formatted")
    return ValidationResult.ok()

def _legacy_ipv4(host: str) -> Optional[str]:
    """Normalise inet_aton style spellings (``0x7f.1``, ``2130706433``) to dotted quad."""
    parts = host.split(".")
    if parts and parts[-1] == "":
        parts.pop()
    if not parts or len(parts) > 4:
        return None

    nums = []
    for part in parts:
        if not _IPV4_PART_RE.fullmatch(part):
            return None
        if part[:2] in ("0x", "0X"):
            nums.append(int(part[2:] or "0", 16))
        elif len(part) > 1 and part[0] == "0":
            nums.append(int(part, 8))
        else:
            nums.append(int(part))

    if any(n > 255 for n in nums[:-1]):
        return None
    if nums[-1] >= 256 ** (5 - len(nums)):
        return None

    value = nums[-1]
    for i, n in enumerate(nums[:-1]):
        value += n * 256 ** (3 - i)
    return str(ipaddress.IPv4Address(value))

def _is_internal_ip(host: str) -> bool:
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return False
    mapped = getattr(ip, "ipv4_mapped", None)
    if mapped is not None:
        ip = mapped
    # non-global covers private, loopback, link-local, unspecified and
    # shared (100.64/10) space
    return not ip.is_global or ip.is_multicast or ip.is_reserved

def _matches_block_tables(host: str) -> bool:
    if host in BLOCKED_HOSTS:
        return True
    return any(p.search(host) for p in BLOCKED_IP_PATTERNS)

def _ascii_host(host: str) -> Optional[str]:
    """IDNA-encode a hostname the way HTTP clients do before connecting.

    Maps fullwidth characters and ideographic dots to ASCII, so
    ``127\u30020\u30020\u30021`` is classified as ``127.0.0.1``.
    """
    if host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii").lower()
    except UnicodeError:
        return None

def is_blocked_host(hostname) -> bool:
    if not isinstance(hostname, str):
        return False
    host = _ascii_host(hostname.strip("[]").lower())
    if host is None:
        # a host no client can encode is never a legitimate target
        return True
    if host.endswith(".") and not host.endswith(".."):
        host = host[:-1]

    if _matches_block_tables(host):
        return True

    normalised = _legacy_ipv4(host)
    if normalised is not None and (
        _matches_block_tables(normalised) or _is_internal_ip(normalised)
    ):
        return True

    # drop any IPv6 zone id before classifying
    return _is_internal_ip(host.split("%", 1)[0])

def validate_url(url, field_name: str = "URL") -> ValidationResult:
    fmt = validate_url_format(url)
    if not fmt.valid:
        return ValidationResult.fail(f"{field_name}: {fmt.error}")

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        port = parts.port
    except ValueError as e:
        return ValidationResult.fail(f"{field_name} is not a valid URL: {e}")

    if parts.scheme != "https":
        return ValidationResult.fail(f"{field_name} must use HTTPS protocol")
    if not hostname:
        return ValidationResult.fail(f"{field_name} is not a valid URL: missing hostname")

    if is_blocked_host(hostname):
        return ValidationResult.fail(
            f"{field_name} hostname is blocked (potential SSRF): {hostname}"
        )

    # anything but the default port is treated as a port scan attempt
    if port is not None and port != HTTPS_DEFAULT_PORT:
        return ValidationResult.fail(f"{field_name} uses non-standard HTTPS port: {port}")

    return ValidationResult.ok()

def validate_urls(obj: Mapping[str, Any], url_fields: Iterable[str]) -> ValidationResult:
    errors = []
    for field in url_fields:
        value = obj.get(field)
        if value is None:
            continue  # optional
        result = validate_url(value, field)
        if not result.valid:
            errors.append(result.error)

    if errors:
        return ValidationResult.fail("; ".join(errors), errors=errors)
    return ValidationResult.ok()
