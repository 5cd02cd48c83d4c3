from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ValidationResult:
    """Outcome of a single validation call.

    ``valid`` is True exactly when ``error`` is None. ``warnings`` never
    affect ``valid``.
    """

    valid: bool
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    checksummed: Optional[str] = None
    path: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.valid and self.error is not None:
            raise ValueError("a valid ValidationResult cannot carry an error")
        if not self.valid and not self.error:
            raise ValueError("a failed ValidationResult needs an error message")

    @classmethod
    def ok(cls, warnings: Optional[List[str]] = None, **extra) -> "ValidationResult":
        return cls(True, None, list(warnings or []), **extra)

    @classmethod
    def fail(cls, error: str, warnings: Optional[List[str]] = None, **extra) -> "ValidationResult":
        return cls(False, error, list(warnings or []), **extra)

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"valid": self.valid}
        if self.error is not None:
            out["error"] = self.error
        if self.warnings:
            out["warnings"] = list(self.warnings)
        if self.errors:
            out["errors"] = list(self.errors)
        if self.checksummed is not None:
            out["checksummed"] = self.checksummed
        if self.path is not None:
            out["path"] = self.path
        return out
