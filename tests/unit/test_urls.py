from __future__ import annotations

import pytest

from registry_guard.urls import is_blocked_host, validate_url, validate_url_format, validate_urls


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/",
        "https://github.com/user/repo",
        "https://www.google.com/",
        "https://t.me/channel",
        "https://example.com/path?q=1#frag",
        "https://example.com:443/",
    ],
)
def test_accepts_public_https(url: str) -> None:
    assert validate_url(url).valid


def test_format_rejects_non_string() -> None:
    result = validate_url_format(None)
    assert not result.valid
    assert result.error == "URL must be a string"


def test_format_rejects_too_long() -> None:
    result = validate_url_format("https://example.com/" + "a" * 500)
    assert not result.valid
    assert "URL too long" in result.error


@pytest.mark.parametrize(
    "url, fragment",
    [
        ("https://example.com\nmalicious", "newline"),
        ("https://example.com\rSet-Cookie: admin=true", "newline"),
        ("https://exa mple.com/", "whitespace"),
        ("https://example.com/\t", "whitespace"),
        ("https://example.com/\x00", "control"),
        ("http://example.com/", "https://"),
        ("HTTPS://example.com/", "https://"),
        ("ftp://example.com/", "https://"),
        ("https://", "https://"),
    ],
)
def test_format_failures(url: str, fragment: str) -> None:
    result = validate_url(url, "website")
    assert not result.valid
    assert result.error.startswith("website: ")
    assert fragment in result.error


def test_non_standard_port() -> None:
    result = validate_url("https://example.com:8080/")
    assert not result.valid
    assert "non-standard" in result.error


def test_invalid_port_reported_not_raised() -> None:
    result = validate_url("https://example.com:99999/")
    assert not result.valid
    assert "not a valid URL" in result.error


def test_missing_hostname() -> None:
    result = validate_url("https:///path")
    assert not result.valid
    assert "missing hostname" in result.error


@pytest.mark.parametrize(
    "host",
    [
        "localhost",
        "LOCALHOST",
        "localhost.",
        "127.0.0.1",
        "127.1.2.3",
        "0.0.0.0",
        "::1",
        "169.254.169.254",
        "169.254.169.253",
        "metadata.google.internal",
        "metadata",
        "10.0.0.1",
        "10.255.255.255",
        "172.16.0.1",
        "172.31.255.255",
        "192.168.0.1",
        "192.168.255.255",
        "fe80::1",
        "fe80::dead:beef",
        "fc00::1",
        "fc00:dead:beef::1",
        "fd00::1",
        "fd00:1234:5678::abcd",
    ],
)
def test_blocked_hosts(host: str) -> None:
    assert is_blocked_host(host)


@pytest.mark.parametrize("host", ["example.com", "github.com", "8.8.8.8", "172.32.0.1", "2606:4700::1111"])
def test_public_hosts_not_blocked(host: str) -> None:
    assert not is_blocked_host(host)


@pytest.mark.parametrize(
    "host",
    ["2130706433", "0x7f.1", "0177.0.0.1", "127.1", "0x7f000001", "::ffff:127.0.0.1", "fd12:3456::1", "100.64.0.1"],
)
def test_alternate_ip_spellings_blocked(host: str) -> None:
    assert is_blocked_host(host)


def test_is_blocked_host_non_string() -> None:
    assert is_blocked_host(None) is False


def test_validate_many_aggregates_and_skips_missing() -> None:
    info = {
        "website": "https://example.com/",
        "twitter": "https://127.0.0.1/",
        "github": "http://github.com/",
        "telegram": None,
    }
    result = validate_urls(info, ["website", "twitter", "github", "telegram", "discord"])
    assert not result.valid
    assert len(result.errors) == 2
    assert result.errors[0].startswith("twitter")
    assert result.errors[1].startswith("github")
    assert "; " in result.error


def test_validate_many_all_good() -> None:
    result = validate_urls({"website": "https://example.com/"}, ["website", "docs"])
    assert result.valid
    assert result.errors == []
