"""Per-panel metadata files written next to the panel images."""

import json
from pathlib import Path

from ..types import PanelResult
from .panel_illustrator import panel_basename


def sidecar_path(panels_dir: Path, index: int) -> Path:
    return Path(panels_dir) / f"{panel_basename(index)}.meta.json"


def write_panel_sidecar(panels_dir: Path, panel: PanelResult, local_image_path: str) -> Path:
    """Write ``panel-NNN.meta.json`` holding the panel result and its image path."""
    path = sidecar_path(panels_dir, panel.index)
    payload = {**panel.to_dict(), "localImagePath": str(local_image_path)}
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def read_panel_sidecar(path: Path) -> tuple[PanelResult, str]:
    """Read a sidecar back into a PanelResult and the local image path."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return PanelResult.from_dict(payload), payload["localImagePath"]
