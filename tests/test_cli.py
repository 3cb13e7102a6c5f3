"""Tests for the python -m viteset_client watcher."""
from viteset_client import ProtocolError, Update
from viteset_client.__main__ import main, parse_args, print_update


def test_parse_args():
    args = parse_args(["--blob", "b", "--secret", "s", "--interval", "30"])

    assert args.blob == "b"
    assert args.secret == "s"
    assert args.host is None
    assert args.interval_seconds == 30.0


def test_print_update(capsys):
    print_update(Update.changed(b"hello"))
    print_update(Update.failed(ProtocolError(500, "down")))

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Update: value: hello"
    assert out[1].startswith("Update: error: expected status code 200 but got 500")


def test_missing_secret_exits_with_error(monkeypatch):
    monkeypatch.delenv("VITESET_SECRET", raising=False)

    assert main(["--blob", "b"]) == 2


def test_negative_interval_exits_with_error():
    assert main(["--blob", "b", "--secret", "s", "--interval", "-1"]) == 2
