import re
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .config import RESERVED_KEYS, ConfigError, max_json_bytes

class SafeJsonError(ValueError):
    pass

class JsonFileNotFoundError(SafeJsonError):
    pass

class JsonFileTooLargeError(SafeJsonError):
    pass

class InvalidJsonError(SafeJsonError):
    pass

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")

# parsing helpers

def _drop_reserved_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    # reserved keys are never assigned, at any depth
    out: Dict[str, Any] = {}
    for key, value in pairs:
        if key in RESERVED_KEYS:
            continue
        out[key] = value
    return out

def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON constant: {name}")

# public API

def safe_parse(text: Union[str, bytes]) -> Any:
    """Parse JSON text, dropping ``__proto__``/``constructor``/``prototype`` keys.

    Raises ``json.JSONDecodeError`` on malformed input and ``InvalidJsonError``
    when nesting exceeds the interpreter recursion limit; both are ``ValueError``.
    """
    try:
        obj = json.loads(
            text,
            object_pairs_hook=_drop_reserved_keys,
            parse_constant=_reject_constant,
        )
    except RecursionError as e:
        raise InvalidJsonError("Invalid JSON: nesting too deep") from e
    if isinstance(obj, dict):
        for key in RESERVED_KEYS:
            obj.pop(key, None)
    return obj

def safe_read_json(path: Union[str, Path], max_bytes: Optional[int] = None) -> Any:
    """Read and parse a JSON file without ever loading more than ``max_bytes``."""
    p = Path(path)
    limit = max_json_bytes() if max_bytes is None else max_bytes

    try:
        size = p.stat().st_size
    except FileNotFoundError:
        raise JsonFileNotFoundError(f"File not found: {p}")
    if size > limit:
        raise JsonFileTooLargeError(
            f"File too large: {size} bytes (max: {limit} bytes). File: {p}"
        )

    try:
        with p.open("rb") as fh:
            raw = fh.read(limit + 1)
    except FileNotFoundError:
        raise JsonFileNotFoundError(f"File not found: {p}")

    # stat can lie (symlink swapped after the check, special files)
    if len(raw) > limit:
        raise JsonFileTooLargeError(
            f"File too large: content exceeds {limit} bytes. File: {p}"
        )

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidJsonError(f"Invalid JSON in {p.name}: not valid UTF-8 ({e.reason})")

    try:
        return safe_parse(content)
    except ValueError as e:
        raise InvalidJsonError(f"Invalid JSON in {p.name}: {e}") from e

def load_json_config(path: Union[str, Path], name: str) -> Dict[str, Any]:
    """Load a required JSON object; any problem is a ``ConfigError``."""
    try:
        data = safe_read_json(path)
    except SafeJsonError as e:
        raise ConfigError(f"Failed to load {name}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to load {name}: {e.strerror or e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Failed to load {name}: must be a JSON object")
    return data

def sanitize_for_terminal(text: Any) -> str:
    if not isinstance(text, str):
        text = str(text)
    text = ANSI_RE.sub("", text)
    return CONTROL_RE.sub("", text)
