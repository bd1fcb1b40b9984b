"""Unit tests for the generate_comic CLI."""

import sys
from dataclasses import replace

import pytest

from cli import generate_comic
from tests.unit.fakes import FIFTY_WORD_STORY, script_json


@pytest.fixture
def story_file(tmp_path):
    path = tmp_path / "monsoon.txt"
    path.write_text(FIFTY_WORD_STORY, encoding="utf-8")
    return path


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["generate_comic.py", *map(str, args)])
    generate_comic.main()


def test_missing_model_key_exits_with_message(monkeypatch, capsys, story_file, tmp_path):
    def no_keys(store, settings):
        raise ValueError("No API key found. Set OPENAI_API_KEY, ANTHROPIC_API_KEY, or GOOGLE_API_KEY in .env")

    monkeypatch.setattr(generate_comic, "create_comic_pipeline", no_keys)

    with pytest.raises(SystemExit) as exc_info:
        run_cli(monkeypatch, story_file, "--output-dir", tmp_path / "out")

    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "Cannot start comic generation: No API key found" in err
    assert "Traceback" not in err


def test_missing_story_file(monkeypatch, capsys, tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        run_cli(monkeypatch, tmp_path / "nope.txt")

    assert exc_info.value.code == 1
    assert "Story file not found" in capsys.readouterr().err


def test_generates_pdf(monkeypatch, capsys, make_pipeline, story_file, tmp_path):
    def factory(store, settings):
        pipeline = make_pipeline(
            ["A summary.", script_json(4)],
            settings=replace(settings, work_root=tmp_path / "work"),
        )
        pipeline.store = store
        return pipeline

    monkeypatch.setattr(generate_comic, "create_comic_pipeline", factory)

    run_cli(monkeypatch, story_file, "--panels", 4, "--per-page", 2, "--output-dir", tmp_path / "out")

    out = capsys.readouterr().out
    assert "panel 4/4 done" in out
    saved = out.strip().splitlines()[-1]
    assert saved.startswith("Comic saved to: ")
    assert saved.endswith("-comic.pdf")
    assert list((tmp_path / "out").glob("*-comic.pdf"))
