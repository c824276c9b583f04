from pathlib import Path

from click.testing import CliRunner

from torexit import __version__
from torexit.cli import cli
from torexit.detector.feed import FeedFetcher

FEED = "ExitAddress 1.2.3.4 2023-01-01 00:00:00\nExitAddress 5.6.7.8 2023-01-01 00:00:00\n"


def test_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_check(tmp_path):
    path = tmp_path / "list.txt"
    path.write_text("1.2.3.4\n5.6.7.8")

    result = CliRunner().invoke(
        cli, ["detector", "check", "1.2.3.4", "8.8.8.8", "bogus", "--list-path", str(path)]
    )

    assert result.exit_code == 0
    assert "TOR EXIT" in result.output
    assert "Invalid IP" in result.output
    assert "1 of 3 IPs are Tor exit nodes" in result.output


def test_check_without_path(monkeypatch):
    monkeypatch.delenv("TOREXIT_LIST_PATH", raising=False)

    result = CliRunner().invoke(cli, ["detector", "check", "1.2.3.4"])

    assert result.exit_code == 1
    assert "No path has been set" in result.output


def test_check_empty_list(tmp_path):
    path = tmp_path / "list.txt"
    path.write_text("")

    result = CliRunner().invoke(cli, ["detector", "check", "1.2.3.4", "-l", str(path)])

    assert result.exit_code == 1
    assert "empty" in result.output


def test_refresh(tmp_path, monkeypatch):
    monkeypatch.setattr(FeedFetcher, "fetch", lambda self: FEED)
    path = tmp_path / "list.txt"

    result = CliRunner().invoke(cli, ["detector", "refresh", "--list-path", str(path)])

    assert result.exit_code == 0
    assert "2 addresses" in result.output
    assert path.read_text() == "1.2.3.4\n5.6.7.8"


def test_refresh_without_path(monkeypatch):
    monkeypatch.delenv("TOREXIT_LIST_PATH", raising=False)
    calls = []
    monkeypatch.setattr(FeedFetcher, "fetch", lambda self: calls.append(self) or FEED)

    result = CliRunner().invoke(cli, ["detector", "refresh"])

    assert result.exit_code == 1
    assert calls == []


def test_status(tmp_path):
    path = tmp_path / "list.txt"
    path.write_text("1.2.3.4\n5.6.7.8\n9.9.9.9")

    result = CliRunner().invoke(cli, ["detector", "status", "--list-path", str(path)])

    assert result.exit_code == 0
    assert "Addresses" in result.output
    assert "3" in result.output
    assert Path(path).exists()


def test_refresh_counts_duplicate_feed_entries(tmp_path, monkeypatch):
    feed = FEED + "ExitAddress 1.2.3.4 2023-01-02 00:00:00\n"
    monkeypatch.setattr(FeedFetcher, "fetch", lambda self: feed)
    path = tmp_path / "list.txt"

    result = CliRunner().invoke(cli, ["detector", "refresh", "--list-path", str(path)])

    assert result.exit_code == 0
    assert "3 addresses" in result.output
    assert path.read_text() == "1.2.3.4\n5.6.7.8\n1.2.3.4"
