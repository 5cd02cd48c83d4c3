import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from colorama import Fore, Style
from tqdm import tqdm

from .safe_json import sanitize_for_terminal

ERROR = "error"
WARN = "warn"
INFO = "info"
SUCCESS = "success"
DEBUG = "debug"

STYLES = {
    ERROR: (Fore.RED, "[!]"),
    WARN: (Fore.YELLOW, "[~]"),
    INFO: (Fore.CYAN, "[i]"),
    SUCCESS: (Fore.GREEN, "[✓]"),
    DEBUG: (Fore.MAGENTA, "[*]"),
}

@dataclass
class Tally:
    errors: int = 0
    warnings: int = 0
    info: int = 0

    @property
    def total(self) -> int:
        return self.errors + self.warnings

class Reporter:
    """Writes sanitized, coloured (or JSON-lines) messages and counts them.

    Each run owns its Reporter, so counts never leak between runs.
    """

    def __init__(self, fmt: str = "human", debug: bool = False, stream: Optional[TextIO] = None):
        self.fmt = fmt
        self.debug_enabled = debug
        self.stream = stream
        self.tally = Tally()

    def _emit(self, line: str) -> None:
        tqdm.write(line, file=self.stream)

    def log(self, level: str, message: Any, **meta) -> None:
        text = sanitize_for_terminal(message)
        if self.fmt == "json":
            entry: Dict[str, Any] = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": level,
                "message": text,
            }
            entry.update({k: sanitize_for_terminal(v) if isinstance(v, str) else v for k, v in meta.items()})
            self._emit(json.dumps(entry, default=str))
            return

        colour, prefix = STYLES.get(level, ("", ""))
        self._emit(f"{colour}{prefix} {text}{Style.RESET_ALL}")
        if meta:
            clean = sanitize_for_terminal(json.dumps(meta, default=str))
            self._emit(f"{Fore.CYAN}    ↪ {clean}{Style.RESET_ALL}")

    def error(self, message: Any, **meta) -> None:
        self.log(ERROR, message, **meta)
        self.tally.errors += 1

    def warn(self, message: Any, **meta) -> None:
        self.log(WARN, message, **meta)
        self.tally.warnings += 1

    def info(self, message: Any, **meta) -> None:
        self.log(INFO, message, **meta)
        self.tally.info += 1

    def success(self, message: Any, **meta) -> None:
        self.log(SUCCESS, message, **meta)

    def debug(self, message: Any, **meta) -> None:
        if self.debug_enabled:
            self.log(DEBUG, message, **meta)

    def section(self, title: Any) -> None:
        clean = sanitize_for_terminal(title)
        if self.fmt == "json":
            self.log(INFO, clean, type="section")
            return
        bar = "=" * 60
        self._emit(f"\n{Fore.MAGENTA}{bar}\n{clean}\n{bar}{Style.RESET_ALL}")

    def summary(self) -> None:
        self.section("Validation Summary")
        t = self.tally
        if self.fmt == "json":
            self.log(INFO, "Validation complete", total=t.total, **asdict(t))
            return
        self._emit(f"{Fore.BLUE}Total issues: {t.total}{Style.RESET_ALL}")
        self._emit(f"  {Fore.RED}Errors: {t.errors}{Style.RESET_ALL}")
        self._emit(f"  {Fore.YELLOW}Warnings: {t.warnings}{Style.RESET_ALL}")
        self._emit(f"  {Fore.CYAN}Info: {t.info}{Style.RESET_ALL}")
