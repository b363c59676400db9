"""Tests for the inventory-inbox command line."""
import io
import os
from unittest.mock import patch

import pytest

from inventory_inbox import cli
from inventory_inbox.items import Item
from inventory_inbox.ledger import read_items


@pytest.fixture
def message(tmp_path):
    """A submission saved to a text file."""
    path = tmp_path / "message.txt"
    path.write_text("3 boxes of screws\n2x paint brush\nhammer\n\n", encoding="utf-8")
    return path


class TestParseCommand:
    """Tests for `inventory-inbox parse`."""

    def test_parse_file(self, message, capsys):
        assert cli.main(["parse", str(message)]) == 0

        out = capsys.readouterr().out
        assert out.splitlines() == [
            "3 × boxes of screws",
            "2 × paint brush",
            "1 × hammer",
        ]

    def test_parse_stdin(self, capsys):
        with patch("sys.stdin", io.StringIO("42\n")):
            assert cli.main(["parse", "-"]) == 0

        assert capsys.readouterr().out == "42 × 42\n"

    def test_parse_missing_file(self, tmp_path, capsys):
        assert cli.main(["parse", str(tmp_path / "nope.txt")]) == 1
        assert "could not read" in capsys.readouterr().err

    def test_parse_invalid_utf8(self, tmp_path, capsys):
        bad = tmp_path / "bad.txt"
        bad.write_bytes(b"\xff\xfe hammer")

        assert cli.main(["parse", str(bad)]) == 1
        assert "not valid UTF-8" in capsys.readouterr().err


class TestAddCommand:
    """Tests for `inventory-inbox add`."""

    def test_add_appends_to_store(self, message, tmp_path, capsys):
        store = tmp_path / "inventory.csv"

        assert cli.main(["add", str(message), "--store", str(store)]) == 0
        assert cli.main(["add", str(message), "--store", str(store)]) == 0

        assert read_items(store) == [
            Item("boxes of screws", 3),
            Item("paint brush", 2),
            Item("hammer", 1),
        ] * 2
        assert "Appended 3 item(s)" in capsys.readouterr().out

    def test_add_empty_input(self, tmp_path, capsys):
        store = tmp_path / "inventory.csv"

        with patch("sys.stdin", io.StringIO("\n\n")):
            assert cli.main(["add", "--store", str(store)]) == 0

        assert "No items found" in capsys.readouterr().out
        assert read_items(store) == []

    def test_add_invalid_utf8(self, tmp_path, capsys):
        bad = tmp_path / "bad.txt"
        bad.write_bytes(b"\xff\xfe hammer")
        store = tmp_path / "inventory.csv"

        assert cli.main(["add", str(bad), "--store", str(store)]) == 1
        assert "not valid UTF-8" in capsys.readouterr().err
        assert not store.exists()

    def test_add_write_failure(self, message, tmp_path, capsys):
        store = tmp_path / "missing" / "inventory.csv"

        assert cli.main(["add", str(message), "--store", str(store)]) == 1
        assert "Failed to write" in capsys.readouterr().err


class TestServeCommand:
    """Tests for `inventory-inbox serve`."""

    def test_serve_runs_uvicorn(self, tmp_path, monkeypatch):
        store = tmp_path / "inventory.csv"
        monkeypatch.setenv("INVENTORY_INBOX_STORE", "unset")

        with patch("uvicorn.run") as mock_run:
            assert cli.main(["serve", "--store", str(store), "--port", "8123"]) == 0

        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == 8123
        assert mock_run.call_args.kwargs["host"] == "0.0.0.0"
        assert os.environ["INVENTORY_INBOX_STORE"] == str(store.resolve())

    def test_serve_missing_directory(self, tmp_path):
        store = tmp_path / "missing" / "inventory.csv"

        with patch("uvicorn.run") as mock_run:
            assert cli.main(["serve", "--store", str(store)]) == 1

        mock_run.assert_not_called()


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage: inventory-inbox" in capsys.readouterr().out
