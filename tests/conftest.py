from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _add_src_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_path = repo_root / "src"
    if src_path.exists():
        src_str = str(src_path)
        if src_str not in sys.path:
            sys.path.insert(0, src_str)


_add_src_to_path()

from helpers import CHECKSUMMED, TOKEN_ADDRESS, VALID_SOLIDITY, write_json  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("REGISTRY_MAX_JSON_BYTES", "REGISTRY_MAX_SOLIDITY_BYTES", "LOG_FORMAT", "DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def registry(tmp_path: Path) -> Path:
    """A registry tree with one good token and one good project."""
    root = tmp_path / "registry"
    write_json(
        root / "tokens" / TOKEN_ADDRESS / "info.json",
        {
            "address": TOKEN_ADDRESS,
            "symbol": "VINU",
            "name": "Vinu Token",
            "decimals": 18,
            "website": "https://example.com/",
        },
    )
    project = root / "contracts" / "vinuswap"
    write_json(
        project / "info.json",
        {
            "name": "VinuSwap",
            "website": "https://github.com/vinuswap",
            "email": "dev@vinuswap.org",
            "contracts": [{"name": "Factory", "address": CHECKSUMMED[1]}],
        },
    )
    write_json(
        project / "abis" / "Factory.json",
        [
            {"type": "constructor", "inputs": []},
            {
                "type": "function",
                "name": "count",
                "inputs": [],
                "outputs": [{"name": "", "type": "uint256"}],
                "stateMutability": "view",
            },
        ],
    )
    (project / "sources").mkdir(parents=True, exist_ok=True)
    (project / "sources" / "Factory.sol").write_text(VALID_SOLIDITY, encoding="utf-8")
    return root
