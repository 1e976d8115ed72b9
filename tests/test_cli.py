"""Tests for the ``python -m commentforest`` entry-point."""

import json
from pathlib import Path

import pytest

from commentforest import config
from commentforest.__main__ import main

_VIDEOS = [
    {
        "id": "v1",
        "title": "Launch video",
        "channelTitle": "Chan",
        "url": "https://youtube.com/watch?v=v1",
        "comments": [
            {"id": "c1", "text": "Hello", "author": "User1", "likeCount": 5},
            {"id": "c2", "parentId": "c1", "text": "Hi back", "author": "User2"},
            {"id": "c3", "parentId": "gone", "text": "Lost", "author": "User3"},
        ],
    }
]


@pytest.fixture()
def payload_file(tmp_path: Path) -> Path:
    path = tmp_path / "videos.json"
    path.write_text(json.dumps(_VIDEOS), encoding="utf-8")
    return path


class TestCli:
    def test_render(self, payload_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["render", "--service", "youtube", str(payload_file)])
        out = capsys.readouterr().out
        assert "# Launch video" in out
        assert "Source: YouTube" in out
        assert "**User1**:" in out
        assert "Score: 5" in out
        assert "  Hi back" in out
        assert "[Reply to unavailable comment] Lost" in out

    def test_prepare_limit(self, payload_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["prepare", "--service", "youtube", "--max-comments", "1", str(payload_file)])
        out = capsys.readouterr().out
        assert "Hello" in out
        assert "Hi back" not in out
        assert "limited to 1 comments" in out

    def test_stats(self, payload_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["stats", "--service", "youtube", str(payload_file)])
        out = capsys.readouterr().out
        assert out.strip() == "Launch video\tcomments=3\troots=2\torphans=1\tdepth=2"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["render", "--service", "youtube", str(tmp_path / "nope.json")])
        assert exc.value.code == 1

    def test_invalid_json(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["stats", "--service", "reddit", str(bad)])
        assert exc.value.code == 1

    def test_no_command(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1

    def test_stats_help_explains_orphan_count(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["stats", "--help"])
        assert exc.value.code == 0
        out = " ".join(capsys.readouterr().out.split())
        assert "'[Reply to unavailable comment]'" in out
        assert "counted as one too" in out

    def test_unknown_log_level_falls_back(
        self,
        payload_file: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr(config, "LOG_LEVEL", config.parse_log_level("VERBOSE"))
        main(["stats", "--service", "youtube", str(payload_file)])
        assert capsys.readouterr().out.startswith("Launch video\t")
