import os
import re
from typing import Dict, Tuple

class ConfigError(RuntimeError):
    pass

# size limits (bytes)
MAX_FILE_SIZE = 100 * 1024
MAX_SOLIDITY_FILE_SIZE = 500 * 1024

# addresses
ADDRESS_LENGTH = 42  # 0x + 40 hex
ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")
ZERO_ADDRESS = "0x" + "0" * 40

# token metadata
MIN_DECIMALS = 0
MAX_DECIMALS = 77  # uint256 safe maximum
RECOMMENDED_MAX_DECIMALS = 18
SYMBOL_MIN_LENGTH = 1
SYMBOL_MAX_LENGTH = 20
NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 100
TOKEN_URL_FIELDS = ("website", "logo", "whitepaper", "github", "twitter", "telegram", "discord")
PROJECT_URL_FIELDS = ("website", "docs", "github", "twitter", "telegram", "discord", "audit")

# per-submission limits
MAX_CONTRACTS_PER_PROJECT = 50

# urls
MAX_URL_LENGTH = 500
URL_HTTPS_RE = re.compile(r"https://\S+")
HTTPS_DEFAULT_PORT = 443

BLOCKED_HOSTS = frozenset({
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "::1",
    "169.254.169.254",           # AWS metadata
    "metadata.google.internal",  # GCP metadata
    "metadata",
    "169.254.169.253",           # Azure metadata (legacy)
})

BLOCKED_IP_PATTERNS = (
    re.compile(r"^10\."),                        # 10.0.0.0/8
    re.compile(r"^172\.(1[6-9]|2[0-9]|3[0-1])\."),  # 172.16.0.0/12
    re.compile(r"^192\.168\."),                  # 192.168.0.0/16
    re.compile(r"^127\."),                       # loopback
    re.compile(r"^0\."),                         # "this" network
    re.compile(r"^169\.254\."),                  # link-local
    re.compile(r"^::1\Z"),                       # IPv6 loopback
    re.compile(r"^fe80:"),                       # IPv6 link-local
    re.compile(r"^fc00:"),                       # IPv6 unique local
    re.compile(r"^fd00:"),                       # IPv6 unique local
)

# identifiers
SAFE_CONTRACT_NAME_RE = re.compile(r"[A-Z][a-zA-Z0-9]*")
ABI_IDENTIFIER_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")
ABI_TYPE_RE = re.compile(r"[a-zA-Z0-9\[\](), ]+")
RESERVED_KEYS = frozenset({"__proto__", "constructor", "prototype"})

# abi
VALID_ABI_TYPES = ("function", "constructor", "event", "fallback", "receive", "error")
VALID_STATE_MUTABILITY = ("pure", "view", "nonpayable", "payable")
MAX_ABI_DEPTH = 64

# solidity
PRAGMA_RE = re.compile(r"pragma\s+solidity\s+([^;]+);")
SPDX_MARKER = "// SPDX-License-Identifier:"
MIN_RECOMMENDED_SOLIDITY = (0, 7, 0)

# name -> (matcher, warning)
DANGEROUS_SOLIDITY_PATTERNS: Dict[str, Tuple[re.Pattern, str]] = {
    "selfdestruct": (
        re.compile(r"\bselfdestruct\s*\("),
        "Contains selfdestruct - verify this is intentional and safe",
    ),
    "suicide": (
        re.compile(r"\bsuicide\s*\("),
        "Contains suicide (deprecated) - use selfdestruct if needed",
    ),
    "delegatecall": (
        re.compile(r"\bdelegatecall\s*\("),
        "Contains delegatecall - potential proxy vulnerability, ensure target is trusted",
    ),
    "txOrigin": (
        re.compile(r"\btx\.origin\b"),
        "Uses tx.origin - authentication bypass risk, use msg.sender instead",
    ),
    "blockhash": (
        re.compile(r"\bblockhash\s*\("),
        "Uses blockhash - can be manipulated by miners",
    ),
    "callcode": (
        re.compile(r"\bcallcode\s*\("),
        "Contains callcode (deprecated) - use delegatecall if needed",
    ),
}

# email
DISPOSABLE_EMAIL_DOMAINS = frozenset({
    "tempmail.com",
    "guerrillamail.com",
    "10minutemail.com",
    "mailinator.com",
    "throwaway.email",
    "temp-mail.org",
    "sharklasers.com",
    "guerrillamail.info",
    "grr.la",
    "maildrop.cc",
})
RESERVED_EMAIL_DOMAINS = frozenset({
    "localhost",
    "example.com",
    "example.org",
    "example.net",
    "test.com",
    "invalid",
})
COMMON_EMAIL_TYPOS = {
    "gmail.co": "gmail.com",
    "gmial.com": "gmail.com",
    "gmai.com": "gmail.com",
    "outlook.co": "outlook.com",
    "hotmail.co": "hotmail.com",
    "yahoo.co": "yahoo.com",
}

# exit codes
EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_FATAL_ERROR = 2

# environment overrides (a local .env is loaded by the CLI)

def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value

def max_json_bytes() -> int:
    return _int_env("REGISTRY_MAX_JSON_BYTES", MAX_FILE_SIZE)

def max_solidity_bytes() -> int:
    return _int_env("REGISTRY_MAX_SOLIDITY_BYTES", MAX_SOLIDITY_FILE_SIZE)

def log_format() -> str:
    fmt = (os.getenv("LOG_FORMAT") or "human").strip().lower()
    if fmt not in ("human", "json"):
        raise ConfigError(f"LOG_FORMAT must be 'human' or 'json', got {fmt!r}")
    return fmt

def debug_enabled() -> bool:
    return bool(os.getenv("DEBUG"))
