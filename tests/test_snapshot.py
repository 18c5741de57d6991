"""
Tests for snapshot loading and the command-line interface.
"""

import json

import pytest

from feedsuggest import __version__
from feedsuggest.app import main
from feedsuggest.models import Post, User
from feedsuggest.snapshot import SnapshotError, load_snapshot, read_snapshot_data

from conftest import ALICE, BOB, VIEWER


class TestLoadSnapshot:

    def test_load_parses_records(self, snapshot_file):
        snapshot = load_snapshot(snapshot_file)

        assert len(snapshot.users) == 4
        assert snapshot.users[0] == User(
            VIEWER, "Viewer", "solidity developer building decentralized social apps"
        )
        assert len(snapshot.follows) == 3
        assert isinstance(snapshot.posts[0], Post)
        assert snapshot.posts[0].likes == (VIEWER,)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError, match="not found"):
            load_snapshot(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError, match="not valid JSON"):
            read_snapshot_data(path)

    def test_empty_file_is_empty_snapshot(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("")
        snapshot = load_snapshot(path)
        assert snapshot.users == [] and snapshot.follows == [] and snapshot.posts == []

    def test_username_alias_and_string_timestamp(self, tmp_path):
        path = tmp_path / "alias.json"
        path.write_text(json.dumps({
            "users": [{"address": ALICE, "username": "alice"}],
            "posts": [{"author": ALICE, "content": "hi", "timestamp": "1700000000"}],
        }))
        snapshot = load_snapshot(path)
        assert snapshot.users[0].display_name == "alice"
        assert snapshot.posts[0].timestamp == 1700000000.0


class TestCli:

    def test_version(self, capsys):
        main(["--version"])
        assert capsys.readouterr().out.strip() == __version__

    def test_suggest_json(self, snapshot_file, capsys):
        main(["suggest", "--snapshot", str(snapshot_file), "--viewer", VIEWER, "--json"])

        out = json.loads(capsys.readouterr().out)
        assert [s["displayName"] for s in out] == ["Bob", "Carol"]
        assert out[0]["address"] == BOB
        assert 0.0 <= out[0]["score"] <= 1.0

    def test_suggest_text(self, snapshot_file, capsys):
        main(["suggest", "--snapshot", str(snapshot_file), "--viewer", VIEWER, "--limit", "1"])

        out = capsys.readouterr().out
        assert "1. Bob" in out
        assert "1 mutual follower" in out
        assert "Carol" not in out

    def test_suggest_missing_snapshot(self, tmp_path):
        with pytest.raises(SystemExit, match="not found"):
            main(["suggest", "--snapshot", str(tmp_path / "nope.json"), "--viewer", VIEWER])

    def test_validate_ok(self, snapshot_file, capsys):
        main(["validate", "--snapshot", str(snapshot_file)])
        assert "Valid" in capsys.readouterr().out

    def test_validate_reports_errors(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"users": [{"address": "nobody"}]}))

        with pytest.raises(SystemExit) as exc_info:
            main(["validate", "--snapshot", str(path)])

        assert exc_info.value.code == 2
        assert "users[0]" in capsys.readouterr().out

    def test_mutuals(self, snapshot_file, capsys):
        main(["mutuals", "--snapshot", str(snapshot_file), "--a", VIEWER, "--b", BOB])
        out = capsys.readouterr().out
        assert "1 mutual follower(s)" in out
        assert "0xaaaa000000000000000000000000000000000004" in out

    def test_bad_environment_setting(self, monkeypatch):
        monkeypatch.setenv("FEEDSUGGEST_LIMIT", "lots")
        with pytest.raises(SystemExit, match="FEEDSUGGEST_LIMIT"):
            main(["--version"])
