"""Tests for the command-line entry point."""

import json
import sys

import pytest

from recut.cli import main


def _run(monkeypatch, capsys, *argv):
    monkeypatch.setattr(sys, "argv", ["recut", *argv])
    main()
    return json.loads(capsys.readouterr().out)


class TestCli:
    def test_preview(self, monkeypatch, capsys, sample_manifest_path):
        data = _run(monkeypatch, capsys, "preview", str(sample_manifest_path))
        assert data["preview_duration"] == 80.0
        assert len(data["segments"]) == 2

    def test_export_with_ffmpeg_command(self, monkeypatch, capsys, sample_manifest_path):
        data = _run(
            monkeypatch, capsys, "export", str(sample_manifest_path), "-i", "talk.mp4",
        )
        assert data["ffmpeg"][0] == "ffmpeg"
        assert data["ffmpeg"][-1] == "talk_edited.mp4"

    def test_command(self, monkeypatch, capsys, sample_manifest_path):
        data = _run(monkeypatch, capsys, "command", str(sample_manifest_path), "remove all silence")
        assert data["editsApplied"] == 1
        assert data["duration"]["final"] == 77.0

    def test_map(self, monkeypatch, capsys, sample_manifest_path):
        data = _run(monkeypatch, capsys, "map", str(sample_manifest_path), "--original", "45")
        assert data["preview"] is None

    def test_missing_manifest(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "argv", ["recut", "preview", str(tmp_path / "nope.json")])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1

    def test_malformed_manifest_exits_cleanly(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "m.json"
        path.write_text(json.dumps({"duration": 5, "session": {"undo_depth": 3}}))
        monkeypatch.setattr(sys, "argv", ["recut", "preview", str(path)])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1
        assert "cannot load manifest" in capsys.readouterr().err
