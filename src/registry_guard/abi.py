from typing import Any, List

from .config import (
    ABI_IDENTIFIER_RE,
    ABI_TYPE_RE,
    MAX_ABI_DEPTH,
    RESERVED_KEYS,
    VALID_ABI_TYPES,
    VALID_STATE_MUTABILITY,
)
from .results import ValidationResult

NAMED_ITEM_TYPES = ("function", "event", "error")

def _is_identifier(value: Any) -> bool:
    return isinstance(value, str) and ABI_IDENTIFIER_RE.fullmatch(value) is not None

def validate_abi_parameter(param: Any, context: str, depth: int = 0) -> ValidationResult:
    if not isinstance(param, dict):
        return ValidationResult.fail(f"{context}: parameter must be an object")

    ptype = param.get("type")
    if not ptype or not isinstance(ptype, str):
        return ValidationResult.fail(f"{context}: parameter missing 'type' field")

    # name is optional (unnamed outputs are common)
    name = param.get("name")
    if "name" in param and name != "" and not isinstance(name, str):
        return ValidationResult.fail(f"{context}: parameter name must be a string")

    if name:
        if not ABI_IDENTIFIER_RE.fullmatch(name):
            return ValidationResult.fail(
                f"{context}: parameter name '{name}' is invalid (must be valid identifier)"
            )
        if name in RESERVED_KEYS:
            return ValidationResult.fail(
                f"{context}: parameter name '{name}' is not allowed (security risk)"
            )

    if not ABI_TYPE_RE.fullmatch(ptype):
        return ValidationResult.fail(
            f"{context}: parameter type '{ptype}' contains invalid characters"
        )

    components = param.get("components")
    if ptype.startswith("tuple") and components is not None:
        if not isinstance(components, list):
            return ValidationResult.fail(f"{context}: tuple components must be an array")
        if depth >= MAX_ABI_DEPTH:
            return ValidationResult.fail(
                f"{context}: tuple nesting too deep (max: {MAX_ABI_DEPTH} levels)"
            )
        for i, component in enumerate(components):
            result = validate_abi_parameter(component, f"{context}.components[{i}]", depth + 1)
            if not result.valid:
                return result

    return ValidationResult.ok()

def validate_abi_parameters(params: Any, context: str) -> ValidationResult:
    if not isinstance(params, list):
        return ValidationResult.fail(f"{context} must be an array")
    for i, param in enumerate(params):
        result = validate_abi_parameter(param, f"{context}[{i}]")
        if not result.valid:
            return result
    return ValidationResult.ok()

def validate_abi_item(item: Any, index: int) -> ValidationResult:
    warnings: List[str] = []

    if not isinstance(item, dict):
        return ValidationResult.fail(f"ABI item {index} must be an object")

    itype = item.get("type")
    if not itype or not isinstance(itype, str):
        return ValidationResult.fail(f"ABI item {index} missing 'type' field")
    if itype not in VALID_ABI_TYPES:
        return ValidationResult.fail(f"ABI item {index} has invalid type: {itype}")

    name = item.get("name")
    if itype in NAMED_ITEM_TYPES:
        if not name or not isinstance(name, str):
            return ValidationResult.fail(f"ABI item {index} ({itype}) missing 'name' field")
        if not _is_identifier(name):
            return ValidationResult.fail(f"ABI item {index} has invalid name: {name}")

    if itype in ("function", "constructor"):
        if item.get("inputs") is None:
            warnings.append(f"ABI item {index} ({itype}) missing 'inputs' field")
        else:
            result = validate_abi_parameters(item["inputs"], f"ABI item {index}.inputs")
            if not result.valid:
                return result

    if itype == "function":
        if item.get("outputs") is None:
            warnings.append(f"ABI item {index} (function {name}) missing 'outputs' field")
        else:
            result = validate_abi_parameters(item["outputs"], f"ABI item {index}.outputs")
            if not result.valid:
                return result

    mutability = item.get("stateMutability")
    if mutability and mutability not in VALID_STATE_MUTABILITY:
        return ValidationResult.fail(
            f"ABI item {index} has invalid stateMutability: {mutability}"
        )

    if itype == "event":
        if item.get("inputs") is None:
            warnings.append(f"ABI item {index} (event {name}) missing 'inputs' field")
        else:
            result = validate_abi_parameters(item["inputs"], f"ABI item {index}.inputs")
            if not result.valid:
                return result

    if itype == "error" and item.get("inputs") is not None:
        result = validate_abi_parameters(item["inputs"], f"ABI item {index}.inputs")
        if not result.valid:
            return result

    return ValidationResult.ok(warnings)

def validate_abi(abi: Any, contract_name: str = "contract") -> ValidationResult:
    """Validate a whole ABI array.

    The first hard failure rejects the ABI; soft omissions are collected as
    warnings prefixed with the contract name.
    """
    warnings: List[str] = []

    if not isinstance(abi, list):
        return ValidationResult.fail(f"ABI for {contract_name} must be a JSON array")
    if not abi:
        return ValidationResult.fail(f"ABI for {contract_name} is empty")

    for i, item in enumerate(abi):
        result = validate_abi_item(item, i)
        if not result.valid:
            return ValidationResult.fail(f"{contract_name}: {result.error}")
        warnings.extend(f"{contract_name}: {w}" for w in result.warnings)

    kinds = {item.get("type") for item in abi}
    if "constructor" not in kinds and "function" not in kinds:
        warnings.append(
            f"{contract_name}: ABI has no constructor or functions (may be interface/library)"
        )

    return ValidationResult.ok(warnings)
