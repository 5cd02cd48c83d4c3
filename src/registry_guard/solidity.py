import re
from typing import List, Optional, Tuple

from .config import (
    DANGEROUS_SOLIDITY_PATTERNS,
    MIN_RECOMMENDED_SOLIDITY,
    PRAGMA_RE,
    SPDX_MARKER,
    max_solidity_bytes,
)
from .results import ValidationResult

# Textual heuristics only: code inside comments or string literals is matched
# too, and obfuscated calls are missed. Results are review hints, not proof.

ASSEMBLY_RE = re.compile(r'\bassembly\s*(?:"[^"]*"\s*)?(?:\([^)]*\)\s*)?\{')
LOW_LEVEL_CALL_RE = re.compile(r"\.call(?:code)?\s*[({]")
ECRECOVER_RE = re.compile(r"\becrecover\s*\(")
TRANSFER_RE = re.compile(r"\.transfer\s*\(")

# checked in this order so "abstract contract X" is not reported as "contract"
DECLARATION_KINDS = (
    ("abstract", r"\babstract\s+contract\s+{name}"),
    ("contract", r"\bcontract\s+{name}"),
    ("interface", r"\binterface\s+{name}"),
    ("library", r"\blibrary\s+{name}"),
)
_INHERITANCE = r"(?:\s+is\s+[^{;]+?)?\s*\{"

def vtuple(v: str) -> Tuple[int, int, int]:
    parts = v.strip().split(".")
    parts += ["0"] * (3 - len(parts))
    return tuple(int(p) for p in parts[:3])

def parse_pragma_constraints(text: str) -> List[Tuple[str, str]]:
    m = PRAGMA_RE.search(text)
    if not m:
        return []
    clause = m.group(1)
    # "0.6.0 - 0.8.0" hyphen ranges become ">=0.6.0 <=0.8.0"
    clause = re.sub(r"(\d+\.\d+(?:\.\d+)?)\s+-\s+(\d+\.\d+(?:\.\d+)?)", r">=\1 <=\2", clause)
    out = []
    for part in re.split(r"\s+|\|\|", clause.strip()):
        if not part:
            continue
        if re.fullmatch(r"\d+\.\d+(?:\.\d+)?", part):
            part = "=" + part
        mo = re.fullmatch(r"(\^|~|=|>=|<=|>|<)\s*(\d+\.\d+(?:\.\d+)?)", part)
        if not mo:
            continue
        op, ver = mo.groups()
        if ver.count(".") == 1:
            ver += ".0"
        out.append((op, ver))
    return out

def lowest_pragma_version(text: str) -> Optional[Tuple[int, int, int]]:
    lower_bounds = [vtuple(v) for op, v in parse_pragma_constraints(text) if op not in ("<", "<=")]
    return min(lower_bounds) if lower_bounds else None

def check_dangerous_patterns(content: str) -> List[str]:
    warnings = []
    for name, (pattern, message) in DANGEROUS_SOLIDITY_PATTERNS.items():
        if pattern.search(content):
            warnings.append(message or f"Contains {name} pattern")
    return warnings

def _declaration_re(template: str, name: str) -> re.Pattern:
    return re.compile(template.format(name=re.escape(name)) + _INHERITANCE)

def extract_contract_type(content: str, contract_name: str) -> Optional[str]:
    if not isinstance(content, str) or not isinstance(contract_name, str) or not contract_name:
        return None
    for kind, template in DECLARATION_KINDS:
        if _declaration_re(template, contract_name).search(content):
            return kind
    return None

def _pragma_warnings(content: str) -> List[str]:
    warnings = []
    m = PRAGMA_RE.search(content)
    version = m.group(1).strip()

    if re.match(r"[0-9]", version) and "^" not in version and ">" not in version:
        warnings.append(
            f"Pragma uses exact version ({version}) - consider using range (e.g., ^0.8.0)"
        )

    lowest = lowest_pragma_version(content)
    if lowest is not None and lowest < MIN_RECOMMENDED_SOLIDITY:
        warnings.append(f"Pragma uses old Solidity version ({version}) - consider upgrading")
    return warnings

def validate_solidity_structure(content, contract_name: str, max_bytes: Optional[int] = None) -> ValidationResult:
    warnings: List[str] = []
    limit = max_solidity_bytes() if max_bytes is None else max_bytes

    if not isinstance(content, str) or not content.strip():
        return ValidationResult.fail("Solidity file is empty")

    size = len(content.encode("utf-8"))
    if size > limit:
        return ValidationResult.fail(f"Solidity file too large: {size} bytes (max: {limit})")

    if SPDX_MARKER not in content:
        warnings.append("Missing SPDX license identifier")

    if not PRAGMA_RE.search(content):
        return ValidationResult.fail("Missing pragma solidity directive")
    warnings.extend(_pragma_warnings(content))

    if extract_contract_type(content, contract_name) is None:
        return ValidationResult.fail(
            f"No declaration found for {contract_name} "
            "(expected contract, interface, library, or abstract contract)"
        )

    warnings.extend(check_dangerous_patterns(content))

    if ASSEMBLY_RE.search(content):
        warnings.append("Contains inline assembly - ensure it's necessary and reviewed")
    if LOW_LEVEL_CALL_RE.search(content):
        warnings.append("Contains low-level call - ensure proper error handling and reentrancy protection")
    if ECRECOVER_RE.search(content):
        warnings.append("Uses ecrecover - ensure signature malleability is handled")
    if TRANSFER_RE.search(content):
        warnings.append("Uses transfer() - consider using call() with value for better gas handling")

    return ValidationResult.ok(warnings)

def validate_solidity_file(content, contract_name: str, max_bytes: Optional[int] = None) -> ValidationResult:
    return validate_solidity_structure(content, contract_name, max_bytes)
