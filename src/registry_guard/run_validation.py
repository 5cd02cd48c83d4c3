import csv
import sys
import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from colorama import init, Fore, Style
from dotenv import load_dotenv
from filelock import FileLock
from tqdm import tqdm

from .abi import validate_abi
from .address import validate_address_directory, validate_eip55_checksum
from .config import (
    EXIT_FATAL_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    MAX_CONTRACTS_PER_PROJECT,
    PROJECT_URL_FIELDS,
    ConfigError,
    debug_enabled,
    log_format,
    max_json_bytes,
    max_solidity_bytes,
)
from .console import Reporter
from .emails import validate_email
from .paths import (
    check_file_access,
    is_directory,
    safe_path_join,
    safe_read_dir,
    safe_read_file,
    validate_contract_name,
    validate_safe_filename,
)
from .safe_json import SafeJsonError, load_json_config, safe_read_json, sanitize_for_terminal
from .solidity import validate_solidity_file
from .tokens import validate_token_info
from .urls import validate_urls

SUMMARY_HEADER = ["kind", "target", "status", "errors", "warnings"]

@dataclass
class Limits:
    json_bytes: int
    solidity_bytes: int
    contracts_per_project: int = MAX_CONTRACTS_PER_PROJECT

@dataclass
class ArtifactRow:
    kind: str
    target: str
    status: str
    errors: int
    warnings: int

    def as_list(self) -> List[Any]:
        return [self.kind, self.target, self.status, self.errors, self.warnings]

def _record(reporter: Reporter, kind: str, target: str, errors: List[str], warnings: List[str]) -> ArtifactRow:
    for w in warnings:
        reporter.warn(w, target=target)
    for e in errors:
        reporter.error(e, target=target)
    if not errors:
        reporter.success(f"{kind} {target} passed")
    return ArtifactRow(kind, target, "fail" if errors else "ok", len(errors), len(warnings))

def _read_json(path: str, limits: Limits):
    """Return (data, error) where error is a display string."""
    try:
        return safe_read_json(path, limits.json_bytes), None
    except SafeJsonError as e:
        return None, str(e)
    except OSError as e:
        return None, f"Error reading file: {e.strerror or e}"

# tokens

def check_token(tokens_dir: Path, dir_name: str, reporter: Reporter, limits: Limits) -> ArtifactRow:
    # the directory name is untrusted; nothing under it is opened until it passes
    dir_check = validate_address_directory(dir_name, tokens_dir)
    if not dir_check.valid:
        return _record(reporter, "token", dir_name, [dir_check.error], [])
    if not is_directory(tokens_dir / dir_name):
        return _record(reporter, "token", dir_name, [f"Token entry {dir_name} is not a directory"], [])

    joined = safe_path_join(tokens_dir, dir_name, "info.json")
    if not joined.valid:
        return _record(reporter, "token", dir_name, [joined.error], [])

    info, err = _read_json(joined.path, limits)
    if err:
        return _record(reporter, "token", dir_name, [err], [])

    result = validate_token_info(info, dir_name, tokens_dir)
    errors = result.errors or ([result.error] if result.error else [])
    return _record(reporter, "token", dir_name, errors, result.warnings)

def validate_tokens(tokens_dir: Path, reporter: Reporter, limits: Limits) -> List[ArtifactRow]:
    listing = safe_read_dir(tokens_dir)
    if not listing["success"]:
        reporter.info(f"Skipping tokens: {listing['error']}")
        return []

    entries = listing["entries"]
    reporter.section(f"Tokens ({len(entries)})")
    rows = []
    with tqdm(total=len(entries), desc="Tokens", unit="tok", dynamic_ncols=True,
              disable=reporter.fmt == "json") as pbar:
        for name in entries:
            pbar.set_postfix(dir=sanitize_for_terminal(name)[:10] + "…")
            try:
                rows.append(check_token(tokens_dir, name, reporter, limits))
            finally:
                pbar.update(1)
    return rows

# projects / contracts

def check_contract(contracts_dir: Path, project: str, entry: Any, index: int,
                   reporter: Reporter, limits: Limits) -> ArtifactRow:
    target = f"{project}/#{index}"
    if not isinstance(entry, dict):
        return _record(reporter, "contract", target, [f"{target}: contract entry must be an object"], [])

    name = entry.get("name")
    name_check = validate_contract_name(name)
    if not name_check.valid:
        return _record(reporter, "contract", target, [f"{target}: {name_check.error}"], [])
    target = f"{project}/{name}"

    errors: List[str] = []
    warnings: List[str] = []

    if entry.get("address") is not None:
        addr = validate_eip55_checksum(entry["address"], target)
        if not addr.valid:
            errors.append(addr.error)

    abi_path = safe_path_join(contracts_dir, project, "abis", f"{name}.json")
    if not abi_path.valid:
        errors.append(abi_path.error)
    elif check_file_access(abi_path.path)["exists"]:
        abi, err = _read_json(abi_path.path, limits)
        if err:
            errors.append(err)
        else:
            result = validate_abi(abi, name)
            if not result.valid:
                errors.append(result.error)
            warnings.extend(result.warnings)
    else:
        reporter.debug(f"No ABI for {target}")

    src_path = safe_path_join(contracts_dir, project, "sources", f"{name}.sol")
    if not src_path.valid:
        errors.append(src_path.error)
    else:
        read = safe_read_file(src_path.path, max_bytes=limits.solidity_bytes)
        if read["success"]:
            result = validate_solidity_file(read["content"], name, limits.solidity_bytes)
            if not result.valid:
                errors.append(f"{target}: {result.error}")
            warnings.extend(f"{target}: {w}" for w in result.warnings)
        elif not read["error"].startswith("File not found"):
            errors.append(f"{target}: {read['error']}")
        else:
            reporter.debug(f"No Solidity source for {target}")

    return _record(reporter, "contract", target, errors, warnings)

def check_project(contracts_dir: Path, project: str, reporter: Reporter, limits: Limits) -> List[ArtifactRow]:
    name_check = validate_safe_filename(project)
    if not name_check.valid:
        return [_record(reporter, "project", project, [name_check.error], [])]
    if not is_directory(contracts_dir / project):
        return [_record(reporter, "project", project, [f"Project entry {project} is not a directory"], [])]

    joined = safe_path_join(contracts_dir, project, "info.json")
    if not joined.valid:
        return [_record(reporter, "project", project, [joined.error], [])]
    info, err = _read_json(joined.path, limits)
    if err:
        return [_record(reporter, "project", project, [err], [])]
    if not isinstance(info, dict):
        return [_record(reporter, "project", project, [f"Project {project}: info.json must be a JSON object"], [])]

    errors: List[str] = []
    warnings: List[str] = []

    urls = validate_urls(info, PROJECT_URL_FIELDS)
    errors.extend(f"{project}: {e}" for e in urls.errors)

    if info.get("email") is not None:
        email = validate_email(info["email"])
        if not email.valid:
            errors.append(f"{project}: {email.error}")
        warnings.extend(f"{project}: {w}" for w in email.warnings)

    contracts = info.get("contracts", [])
    if not isinstance(contracts, list):
        errors.append(f"{project}: 'contracts' must be an array")
        contracts = []
    elif len(contracts) > limits.contracts_per_project:
        errors.append(
            f"{project}: too many contracts ({len(contracts)}, max: {limits.contracts_per_project})"
        )
        contracts = []

    seen = set()
    for entry in contracts:
        name = entry.get("name") if isinstance(entry, dict) else None
        if isinstance(name, str):
            if name in seen:
                errors.append(f"{project}: duplicate contract name {name}")
            seen.add(name)

    rows = [_record(reporter, "project", project, errors, warnings)]
    for i, entry in enumerate(contracts):
        rows.append(check_contract(contracts_dir, project, entry, i, reporter, limits))
    return rows

def validate_projects(contracts_dir: Path, reporter: Reporter, limits: Limits) -> List[ArtifactRow]:
    listing = safe_read_dir(contracts_dir)
    if not listing["success"]:
        reporter.info(f"Skipping contracts: {listing['error']}")
        return []

    entries = listing["entries"]
    reporter.section(f"Projects ({len(entries)})")
    rows = []
    with tqdm(total=len(entries), desc="Projects", unit="proj", dynamic_ncols=True,
              disable=reporter.fmt == "json") as pbar:
        for project in entries:
            pbar.set_postfix(project=sanitize_for_terminal(project)[:10] + "…")
            try:
                rows.extend(check_project(contracts_dir, project, reporter, limits))
            finally:
                pbar.update(1)
    return rows

# summary

def write_summary_csv(path: Path, rows: List[ArtifactRow]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # several CI jobs may append to the same summary
    with FileLock(str(path) + ".lock"):
        new_file = not path.exists() or path.stat().st_size == 0
        with path.open("a", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh)
            if new_file:
                writer.writerow(SUMMARY_HEADER)
            for row in rows:
                writer.writerow(row.as_list())

def _fatal(message: str) -> int:
    print(Fore.RED + f"[!] FATAL: {sanitize_for_terminal(message)}" + Style.RESET_ALL, file=sys.stderr)
    return EXIT_FATAL_ERROR

def _limits(settings: Optional[Dict[str, Any]]) -> Limits:
    limits = Limits(max_json_bytes(), max_solidity_bytes())
    if settings:
        cap = settings.get("max_contracts_per_project", limits.contracts_per_project)
        if isinstance(cap, bool) or not isinstance(cap, int) or cap <= 0:
            raise ConfigError("settings: max_contracts_per_project must be a positive integer")
        limits.contracts_per_project = cap
    return limits

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate registry submissions (tokens and contracts)")
    parser.add_argument("--root", type=str, default=".", help="Registry root containing tokens/ and contracts/")
    parser.add_argument("--tokens", action="store_true", help="Validate tokens/ only")
    parser.add_argument("--contracts", action="store_true", help="Validate contracts/ only")
    parser.add_argument("--all", action="store_true", help="Validate everything (default)")
    parser.add_argument("--settings", type=str, default=None, help="Optional JSON settings file")
    parser.add_argument("--summary-csv", type=str, default=None, help="Append per-artifact results to this CSV")
    parser.add_argument("--format", choices=["human", "json"], default=None,
                        help="Output format (default: LOG_FORMAT or human)")
    args = parser.parse_args(argv)

    load_dotenv()
    init(autoreset=True)

    try:
        fmt = args.format or log_format()
        settings = load_json_config(args.settings, "settings") if args.settings else None
        limits = _limits(settings)
    except ConfigError as e:
        return _fatal(str(e))

    root = Path(args.root)
    if not is_directory(root):
        return _fatal(f"Registry root not found: {root}")

    reporter = Reporter(fmt, debug_enabled())
    run_all = args.all or not (args.tokens or args.contracts)

    rows: List[ArtifactRow] = []
    if run_all or args.tokens:
        rows += validate_tokens(root / "tokens", reporter, limits)
    if run_all or args.contracts:
        rows += validate_projects(root / "contracts", reporter, limits)

    if args.summary_csv:
        write_summary_csv(Path(args.summary_csv), rows)
        reporter.info(f"Wrote {args.summary_csv}")

    reporter.summary()
    return EXIT_VALIDATION_ERROR if reporter.tally.errors else EXIT_SUCCESS

if __name__ == "__main__":
    sys.exit(main())
