# paths.py
import os
import re
from pathlib import Path
from typing import Union

from .config import SAFE_CONTRACT_NAME_RE
from .results import ValidationResult

PathLike = Union[str, Path]

CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")

def validate_safe_filename(filename) -> ValidationResult:
    if not isinstance(filename, str):
        return ValidationResult.fail("Filename must be a string")
    if ".." in filename or "/" in filename or "\\" in filename:
        return ValidationResult.fail(f"Path traversal detected in filename: {filename}")
    if "\x00" in filename:
        return ValidationResult.fail("Filename contains null byte")
    if CONTROL_CHARS_RE.search(filename):
        return ValidationResult.fail("Filename contains control characters")
    return ValidationResult.ok()

def validate_contract_name(name) -> ValidationResult:
    # PascalCase alphanumerics only, so no separator or dot can get through
    if not isinstance(name, str):
        return ValidationResult.fail("Contract name must be a string")
    if not SAFE_CONTRACT_NAME_RE.fullmatch(name):
        return ValidationResult.fail(
            f"Invalid contract name: {name}. Must be PascalCase alphanumeric."
        )
    return ValidationResult.ok()

def is_within(root: Path, target: Path, allow_equal: bool = True) -> bool:
    """True when resolved ``target`` is ``root`` itself or lies beneath it."""
    target_res = target.resolve()
    root_res = root.resolve()
    if target_res == root_res:
        return allow_equal
    return root_res in target_res.parents

def safe_path_join(base_dir: PathLike, *parts) -> ValidationResult:
    for part in parts:
        check = validate_safe_filename(part)
        if not check.valid:
            return check

    try:
        full = Path(base_dir).joinpath(*parts)
        inside = is_within(Path(base_dir), full)
    except (OSError, RuntimeError, ValueError) as e:
        return ValidationResult.fail(f"Path construction failed: {e}")

    if not inside:
        return ValidationResult.fail(
            f"Path escapes base directory: {'/'.join(parts)}"
        )
    return ValidationResult.ok(path=str(full))

# read-only filesystem helpers; each does a single syscall so there is no
# check-then-use window

def check_file_access(path: PathLike) -> dict:
    try:
        with open(path, "rb"):
            pass
        return {"exists": True, "readable": True}
    except FileNotFoundError:
        return {"exists": False, "readable": False}
    except OSError as e:
        return {"exists": True, "readable": False, "error": e.strerror or str(e)}

def safe_read_file(path: PathLike, max_bytes: int = None, encoding: str = "utf-8") -> dict:
    p = Path(path)
    try:
        with p.open("rb") as fh:
            raw = fh.read() if max_bytes is None else fh.read(max_bytes + 1)
    except FileNotFoundError:
        return {"success": False, "error": f"File not found: {p.name}"}
    except PermissionError:
        return {"success": False, "error": f"Permission denied: {p.name}"}
    except OSError as e:
        return {"success": False, "error": f"Error reading file: {e.strerror or e}"}

    if max_bytes is not None and len(raw) > max_bytes:
        return {"success": False, "error": f"File too large: {p.name} exceeds {max_bytes} bytes"}
    try:
        return {"success": True, "content": raw.decode(encoding)}
    except UnicodeDecodeError as e:
        return {"success": False, "error": f"Error reading file: {p.name} is not valid {encoding} ({e.reason})"}

def safe_read_dir(path: PathLike) -> dict:
    p = Path(path)
    try:
        return {"success": True, "entries": sorted(os.listdir(p))}
    except FileNotFoundError:
        return {"success": False, "error": f"Directory not found: {p.name}"}
    except PermissionError:
        return {"success": False, "error": f"Permission denied: {p.name}"}
    except OSError as e:
        return {"success": False, "error": f"Error reading directory: {e.strerror or e}"}

def is_directory(path: PathLike) -> bool:
    try:
        return Path(path).is_dir()
    except OSError:
        return False
