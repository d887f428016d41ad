import io
import json
import sys

import pytest

from hnmcp.cli import DEFAULT_ADDRESS, main, parse_args
from hnmcp.router import PROTOCOL_VERSION


def test_stdio_defaults():
    args = parse_args(["stdio"])
    assert args.command == "stdio"
    assert args.debug is False


def test_stdio_debug_flag():
    assert parse_args(["stdio", "-d"]).debug is True
    assert parse_args(["stdio", "--debug"]).debug is True


def test_http_default_address():
    args = parse_args(["http"])
    assert args.command == "http"
    assert args.address == DEFAULT_ADDRESS
    assert args.address == "0.0.0.0:3000"


def test_http_custom_address_and_debug():
    args = parse_args(["http", "-a", "127.0.0.1:8080", "--debug"])
    assert args.address == "127.0.0.1:8080"
    assert args.debug is True


def test_subcommand_is_required():
    with pytest.raises(SystemExit) as info:
        parse_args([])
    assert info.value.code == 2


def test_unknown_subcommand_is_rejected():
    with pytest.raises(SystemExit) as info:
        parse_args(["serve"])
    assert info.value.code == 2


@pytest.mark.parametrize("address", ["nope", "localhost:3000", "1.2.3.4:99999", "::1:80", "1.2.3.4:"])
def test_invalid_http_address_fails(address, capsys):
    assert main(["http", "--address", address]) == 1
    assert "Error:" in capsys.readouterr().err


def test_stdio_main_answers_initialize(monkeypatch, capsys):
    request = json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize"})
    monkeypatch.setattr(sys, "stdin", io.StringIO(request + "\n"))
    assert main(["stdio"]) == 0
    reply = json.loads(capsys.readouterr().out.strip())
    assert reply["id"] == 1
    assert reply["result"]["protocolVersion"] == PROTOCOL_VERSION