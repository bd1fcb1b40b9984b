"""Unit tests for per-panel metadata files."""

import json

from comicbook.core.modules.sidecar import read_panel_sidecar, sidecar_path, write_panel_sidecar
from comicbook.core.types import PanelResult


def make_panel(**overrides):
    fields = dict(
        index=3,
        scene_title="The Cliff",
        scene_description="Meena looks down at the glowing temple",
        dialogue_telugu="అక్కడ చూడు!",
        image_prompt="manga style. Meena at the cliff.",
        image_url="https://images.test/3.png",
        preview_url="/comics/job/panels/3",
    )
    fields.update(overrides)
    return PanelResult(**fields)


def test_written_next_to_panel_image(tmp_path):
    path = write_panel_sidecar(tmp_path, make_panel(), tmp_path / "panel-003.png")

    assert path == sidecar_path(tmp_path, 3) == tmp_path / "panel-003.meta.json"


def test_read_back_matches_written(tmp_path):
    panel = make_panel()
    path = write_panel_sidecar(tmp_path, panel, str(tmp_path / "panel-003.png"))

    read_panel, local_image_path = read_panel_sidecar(path)

    assert read_panel == panel
    assert local_image_path == str(tmp_path / "panel-003.png")


def test_indented_camel_case_json_keeps_telugu(tmp_path):
    path = write_panel_sidecar(tmp_path, make_panel(scene_title=None), "panel-003.png")

    raw = path.read_text(encoding="utf-8")
    payload = json.loads(raw)

    assert "\n  " in raw
    assert "అక్కడ చూడు!" in raw
    assert payload["sceneTitle"] is None
    assert payload["dialogueTelugu"] == "అక్కడ చూడు!"
    assert payload["localImagePath"] == "panel-003.png"
