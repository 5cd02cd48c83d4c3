import json
from pathlib import Path

# EIP-55 reference vectors
CHECKSUMMED = [
    "0x00c1E515EA9579856304198EFb15f525A0bb50f6",
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
]
TOKEN_ADDRESS = CHECKSUMMED[0]

VALID_SOLIDITY = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

contract Factory {
    uint256 public count;
}
"""


def write_json(path: Path, payload) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
