import re
from typing import Optional

from .config import COMMON_EMAIL_TYPOS, DISPOSABLE_EMAIL_DOMAINS, RESERVED_EMAIL_DOMAINS
from .results import ValidationResult

# simplified RFC 5322
EMAIL_RE = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)
MAX_EMAIL_LENGTH = 254

def is_valid_email_format(email) -> bool:
    if not isinstance(email, str) or len(email) > MAX_EMAIL_LENGTH:
        return False
    return EMAIL_RE.fullmatch(email) is not None

def extract_domain(email) -> Optional[str]:
    if not is_valid_email_format(email):
        return None
    local, sep, domain = email.rpartition("@")
    if not sep or not local:
        return None
    return domain.lower()

def is_disposable_email(email) -> bool:
    return extract_domain(email) in DISPOSABLE_EMAIL_DOMAINS

def is_reserved_email(email) -> bool:
    return extract_domain(email) in RESERVED_EMAIL_DOMAINS

def validate_email(email, field_name: str = "email") -> ValidationResult:
    if not is_valid_email_format(email):
        return ValidationResult.fail(f"{field_name} has invalid format")
    if is_disposable_email(email):
        return ValidationResult.fail(f"{field_name} uses disposable email service (not allowed)")
    if is_reserved_email(email):
        return ValidationResult.fail(f"{field_name} uses reserved/test domain (not allowed)")

    warnings = []
    suggestion = COMMON_EMAIL_TYPOS.get(extract_domain(email))
    if suggestion:
        warnings.append(f"Possible typo in domain: did you mean {suggestion}?")
    return ValidationResult.ok(warnings)
