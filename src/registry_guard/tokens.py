from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .address import validate_token_address
from .config import (
    MAX_DECIMALS,
    MIN_DECIMALS,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    RECOMMENDED_MAX_DECIMALS,
    SYMBOL_MAX_LENGTH,
    SYMBOL_MIN_LENGTH,
    TOKEN_URL_FIELDS,
)
from .emails import validate_email
from .results import ValidationResult
from .urls import validate_urls

def _check_text(info: Dict[str, Any], field: str, lo: int, hi: int, context: str) -> Optional[str]:
    value = info.get(field)
    if not isinstance(value, str):
        return f"{context}: '{field}' must be a string"
    if not lo <= len(value.strip()) <= hi:
        return f"{context}: '{field}' must be {lo}-{hi} characters"
    return None

def validate_token_info(
    info: Any,
    dir_name: str,
    tokens_dir: Union[str, Path],
) -> ValidationResult:
    """Check one token's metadata against its ``tokens/<address>/`` directory.

    Returns every field error at once; the address checks run first so a bad
    directory name is reported before anything else.
    """
    if not isinstance(info, dict):
        return ValidationResult.fail(f"Token {dir_name}: info.json must be a JSON object")

    context = info.get("symbol") if isinstance(info.get("symbol"), str) else dir_name
    addr = validate_token_address(info.get("address"), dir_name, context, tokens_dir)
    if not addr.valid:
        return addr

    errors: List[str] = []
    warnings: List[str] = []

    for field, lo, hi in (
        ("symbol", SYMBOL_MIN_LENGTH, SYMBOL_MAX_LENGTH),
        ("name", NAME_MIN_LENGTH, NAME_MAX_LENGTH),
    ):
        err = _check_text(info, field, lo, hi, context)
        if err:
            errors.append(err)

    decimals = info.get("decimals")
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        errors.append(f"{context}: 'decimals' must be an integer")
    elif not MIN_DECIMALS <= decimals <= MAX_DECIMALS:
        errors.append(f"{context}: 'decimals' must be between {MIN_DECIMALS} and {MAX_DECIMALS}")
    elif decimals > RECOMMENDED_MAX_DECIMALS:
        warnings.append(f"{context}: unusually high decimals ({decimals})")

    urls = validate_urls(info, TOKEN_URL_FIELDS)
    errors.extend(f"{context}: {e}" for e in urls.errors)

    if info.get("email") is not None:
        email = validate_email(info["email"], "email")
        if not email.valid:
            errors.append(f"{context}: {email.error}")
        warnings.extend(f"{context}: {w}" for w in email.warnings)

    if errors:
        return ValidationResult.fail("; ".join(errors), warnings, errors=errors)
    return ValidationResult.ok(warnings, checksummed=addr.checksummed)
