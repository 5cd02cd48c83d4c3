"""Validation of untrusted registry submissions: addresses, URLs, paths, JSON, ABIs and Solidity."""

from .abi import validate_abi, validate_abi_item, validate_abi_parameter, validate_abi_parameters
from .address import (
    is_valid_address_format,
    validate_address_directory,
    validate_address_matches_directory,
    validate_eip55_checksum,
    validate_token_address,
)
from .paths import safe_path_join, validate_contract_name, validate_safe_filename
from .results import ValidationResult
from .safe_json import (
    InvalidJsonError,
    JsonFileNotFoundError,
    JsonFileTooLargeError,
    SafeJsonError,
    safe_parse,
    safe_read_json,
    sanitize_for_terminal,
)
from .solidity import check_dangerous_patterns, extract_contract_type, validate_solidity_file
from .urls import is_blocked_host, validate_url, validate_url_format, validate_urls

__version__ = "0.1.0"
