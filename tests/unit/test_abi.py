from __future__ import annotations

import pytest

from registry_guard.abi import (
    validate_abi,
    validate_abi_item,
    validate_abi_parameter,
    validate_abi_parameters,
)
from registry_guard.config import MAX_ABI_DEPTH

TRANSFER = {
    "type": "function",
    "name": "transfer",
    "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
    "outputs": [{"name": "", "type": "bool"}],
    "stateMutability": "nonpayable",
}


def _nested_tuple(depth: int) -> dict:
    param = {"name": "leaf", "type": "uint256"}
    for i in range(depth):
        param = {"name": f"t{i}", "type": "tuple", "components": [param]}
    return param


def test_parameter_accepts_simple_and_unnamed() -> None:
    assert validate_abi_parameter({"name": "to", "type": "address"}, "p").valid
    assert validate_abi_parameter({"name": "", "type": "uint256[]"}, "p").valid
    assert validate_abi_parameter({"type": "bytes32"}, "p").valid


@pytest.mark.parametrize(
    "param, fragment",
    [
        ("uint256", "must be an object"),
        ({"name": "x"}, "missing 'type'"),
        ({"name": "x", "type": ""}, "missing 'type'"),
        ({"name": 5, "type": "uint256"}, "must be a string"),
        ({"name": None, "type": "uint256"}, "must be a string"),
        ({"name": "bad-name", "type": "uint256"}, "is invalid"),
        ({"name": "x", "type": "uint256;drop"}, "invalid characters"),
        ({"name": "x", "type": "tuple", "components": {"a": 1}}, "components must be an array"),
    ],
)
def test_parameter_failures(param, fragment: str) -> None:
    result = validate_abi_parameter(param, "ctx")
    assert not result.valid
    assert result.error.startswith("ctx")
    assert fragment in result.error


@pytest.mark.parametrize("name", ["__proto__", "constructor", "prototype"])
def test_parameter_reserved_names(name: str) -> None:
    result = validate_abi_parameter({"name": name, "type": "uint256"}, "ctx")
    assert not result.valid
    assert "not allowed" in result.error


def test_tuple_components_recurse_with_path() -> None:
    param = {
        "name": "order",
        "type": "tuple[]",
        "components": [{"name": "maker", "type": "address"}, {"name": "__proto__", "type": "uint8"}],
    }
    result = validate_abi_parameter(param, "ABI item 0.inputs[0]")
    assert not result.valid
    assert "ABI item 0.inputs[0].components[1]" in result.error


def test_tuple_nesting_within_ceiling() -> None:
    assert validate_abi_parameter(_nested_tuple(10), "p").valid


def test_tuple_nesting_beyond_ceiling() -> None:
    result = validate_abi_parameter(_nested_tuple(MAX_ABI_DEPTH + 5), "p")
    assert not result.valid
    assert "nesting too deep" in result.error


def test_parameters_must_be_list() -> None:
    result = validate_abi_parameters({"name": "x"}, "ABI item 0.inputs")
    assert not result.valid
    assert result.error == "ABI item 0.inputs must be an array"


def test_item_function_ok() -> None:
    result = validate_abi_item(TRANSFER, 0)
    assert result.valid
    assert result.warnings == []


@pytest.mark.parametrize(
    "item, fragment",
    [
        ([], "must be an object"),
        ({"name": "x"}, "missing 'type'"),
        ({"type": "modifier", "name": "x"}, "invalid type"),
        ({"type": "function", "inputs": []}, "missing 'name'"),
        ({"type": "event", "name": "../../malicious", "inputs": []}, "invalid name"),
        ({"type": "function", "name": "f", "inputs": [], "outputs": [], "stateMutability": "evil"}, "stateMutability"),
        ({"type": "function", "name": "f", "inputs": "x"}, "must be an array"),
    ],
)
def test_item_failures(item, fragment: str) -> None:
    result = validate_abi_item(item, 3)
    assert not result.valid
    assert fragment in result.error


def test_item_missing_inputs_and_outputs_warn() -> None:
    result = validate_abi_item({"type": "function", "name": "f"}, 2)
    assert result.valid
    assert result.warnings == [
        "ABI item 2 (function) missing 'inputs' field",
        "ABI item 2 (function f) missing 'outputs' field",
    ]


def test_item_event_missing_inputs_warns() -> None:
    result = validate_abi_item({"type": "event", "name": "Transfer"}, 1)
    assert result.valid
    assert result.warnings == ["ABI item 1 (event Transfer) missing 'inputs' field"]


def test_item_nameless_kinds() -> None:
    for kind in ("fallback", "receive"):
        assert validate_abi_item({"type": kind, "stateMutability": "payable"}, 0).valid
    assert validate_abi_item({"type": "constructor", "inputs": []}, 0).valid


def test_item_error_inputs_validated() -> None:
    item = {"type": "error", "name": "Unauthorized", "inputs": [{"name": "constructor", "type": "address"}]}
    result = validate_abi_item(item, 0)
    assert not result.valid
    assert "not allowed" in result.error


def test_abi_must_be_non_empty_list() -> None:
    assert validate_abi({"type": "function"}, "Token").error == "ABI for Token must be a JSON array"
    assert validate_abi([], "Token").error == "ABI for Token is empty"


def test_abi_short_circuits_with_contract_prefix() -> None:
    abi = [TRANSFER, {"type": "function", "name": "f", "inputs": [{"name": "__proto__", "type": "uint256"}]}]
    result = validate_abi(abi, "Test")
    assert not result.valid
    assert result.error.startswith("Test: ABI item 1")
    assert "not allowed" in result.error


def test_abi_collects_prefixed_warnings() -> None:
    result = validate_abi([TRANSFER, {"type": "function", "name": "g"}], "Token")
    assert result.valid
    assert result.warnings == [
        "Token: ABI item 1 (function) missing 'inputs' field",
        "Token: ABI item 1 (function g) missing 'outputs' field",
    ]


def test_abi_interface_heuristic_warning() -> None:
    result = validate_abi([{"type": "event", "name": "Ping", "inputs": []}], "Events")
    assert result.valid
    assert result.warnings == ["Events: ABI has no constructor or functions (may be interface/library)"]
