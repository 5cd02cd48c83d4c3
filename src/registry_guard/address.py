from pathlib import Path
from typing import Optional, Union

from eth_utils import to_checksum_address

from .config import ADDRESS_LENGTH, ADDRESS_RE, ZERO_ADDRESS
from .paths import is_within
from .results import ValidationResult

def is_valid_address_format(address) -> bool:
    if not isinstance(address, str):
        return False
    if len(address) != ADDRESS_LENGTH:
        return False
    return ADDRESS_RE.fullmatch(address) is not None

def validate_eip55_checksum(address, context: str = "address") -> ValidationResult:
    if not is_valid_address_format(address):
        return ValidationResult.fail(
            f"Invalid address format for {context}: must be 0x + 40 hex characters"
        )

    if address == ZERO_ADDRESS:
        return ValidationResult.fail(f"Zero address not allowed for {context}")

    try:
        checksummed = to_checksum_address(address)
    except (ValueError, TypeError) as e:
        return ValidationResult.fail(f"Invalid address for {context}: {e}")

    # never auto-correct: the submitter must supply the canonical form
    if address != checksummed:
        return ValidationResult.fail(
            f"Invalid EIP-55 checksum for {context}: should be {checksummed}",
            checksummed=checksummed,
        )
    return ValidationResult.ok(checksummed=checksummed)

def validate_address_directory(dir_name, parent_path: Union[str, Path]) -> ValidationResult:
    if not is_valid_address_format(dir_name):
        return ValidationResult.fail(f"Invalid address format in directory name: {dir_name}")

    if ".." in dir_name or "/" in dir_name or "\\" in dir_name:
        return ValidationResult.fail(f"Path traversal detected in directory name: {dir_name}")

    # independent of the character checks above: catches symlinked entries
    # and anything the blacklist did not anticipate
    parent = Path(parent_path)
    try:
        inside = is_within(parent, parent / dir_name, allow_equal=False)
    except (OSError, RuntimeError) as e:
        return ValidationResult.fail(f"Could not resolve directory {dir_name}: {e}")
    if not inside:
        return ValidationResult.fail(f"Directory escapes parent path: {dir_name}")

    return ValidationResult.ok()

def validate_address_matches_directory(address, dir_name) -> ValidationResult:
    if address != dir_name:
        return ValidationResult.fail(
            f"Address mismatch: directory is {dir_name}, but address field is {address}"
        )
    return ValidationResult.ok()

def validate_token_address(
    address,
    dir_name,
    context: str = "token",
    parent_path: Optional[Union[str, Path]] = None,
) -> ValidationResult:
    """Directory safety, then checksum, then directory match.

    The directory name is checked first so untrusted names never reach the
    checksum step.
    """
    parent = Path.cwd() if parent_path is None else Path(parent_path)

    dir_check = validate_address_directory(dir_name, parent)
    if not dir_check.valid:
        return dir_check

    checksum = validate_eip55_checksum(address, context)
    if not checksum.valid:
        return checksum

    match = validate_address_matches_directory(address, dir_name)
    if not match.valid:
        return match

    return ValidationResult.ok(checksummed=checksum.checksummed)
