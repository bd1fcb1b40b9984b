"""
Module for laying out finished panels into a printable A4 PDF.

Panels are read from disk, not from memory: ``*.png`` files (excluding
``*.raw.png``) sorted by name give the panel order. Each page is a grid
of two columns, filled left-to-right then top-to-bottom, with a page
number in the bottom-right corner.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4  # 595.28 x 841.89 points
MARGIN = 36
GUTTER = 14
FOOTER_HEIGHT = 30
COLUMNS = 2
PAGE_NUMBER_FONT = "Helvetica"
PAGE_NUMBER_SIZE = 10
PAGE_NUMBER_Y = 14
PANELS_PER_PAGE_OPTIONS = (2, 4, 6)


@dataclass(frozen=True)
class GridLayout:
    """Cell geometry for a page holding ``panels_per_page`` panels."""

    panels_per_page: int
    rows: int
    cell_width: float
    cell_height: float

    @classmethod
    def for_panels_per_page(cls, panels_per_page: int) -> "GridLayout":
        if panels_per_page not in PANELS_PER_PAGE_OPTIONS:
            raise ValueError(
                f"panels_per_page must be one of {PANELS_PER_PAGE_OPTIONS}, got {panels_per_page}"
            )
        rows = panels_per_page // COLUMNS
        return cls(
            panels_per_page=panels_per_page,
            rows=rows,
            cell_width=(PAGE_WIDTH - MARGIN * 2 - GUTTER * (COLUMNS - 1)) / COLUMNS,
            cell_height=(PAGE_HEIGHT - MARGIN * 2 - GUTTER * (rows - 1) - FOOTER_HEIGHT) / rows,
        )

    def cell_origin(self, slot: int) -> tuple[float, float]:
        """Bottom-left corner of grid slot ``slot`` in PDF coordinates."""
        col = slot % COLUMNS
        row = slot // COLUMNS
        x = MARGIN + col * (self.cell_width + GUTTER)
        y_top = PAGE_HEIGHT - MARGIN - row * (self.cell_height + GUTTER)
        return x, y_top - self.cell_height

    def fit_image(self, slot: int, image_width: float, image_height: float) -> tuple[float, float, float, float]:
        """Uniformly scale an image into a cell and centre it. Returns x, y, w, h."""
        x, y = self.cell_origin(slot)
        scale = min(self.cell_width / image_width, self.cell_height / image_height)
        draw_width = image_width * scale
        draw_height = image_height * scale
        return (
            x + (self.cell_width - draw_width) / 2,
            y + (self.cell_height - draw_height) / 2,
            draw_width,
            draw_height,
        )


def panel_position(index: int, panels_per_page: int) -> tuple[int, int]:
    """1-based page number and grid slot for the panel at ``index``."""
    return index // panels_per_page + 1, index % panels_per_page


def list_panel_images(panels_dir: Path) -> list[Path]:
    """Finished panel images in panel order."""
    return sorted(
        (p for p in Path(panels_dir).iterdir()
         if p.is_file() and p.name.endswith(".png") and not p.name.endswith(".raw.png")),
        key=lambda p: p.name,
    )


def build_comic_pdf(
    job_id: str,
    panels_dir: Path,
    output_dir: Path,
    panel_count: int,
    panels_per_page: int,
) -> Path:
    """
    Build the comic PDF.

    Args:
        job_id: Job identifier, used in the output file name
        panels_dir: Directory holding ``panel-NNN.png`` files
        output_dir: Directory to write ``<job_id>-comic.pdf`` into
        panel_count: Number of panels to include
        panels_per_page: 2, 4 or 6

    Returns:
        Path of the written PDF
    """
    grid = GridLayout.for_panels_per_page(panels_per_page)
    pdf_path = Path(output_dir) / f"{job_id}-comic.pdf"
    panel_paths = list_panel_images(panels_dir)[:panel_count]

    pdf = canvas.Canvas(str(pdf_path), pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
    pdf.setTitle(f"Comic {job_id}")

    for page_start in range(0, len(panel_paths), panels_per_page):
        page_number = page_start // panels_per_page + 1
        batch = panel_paths[page_start:page_start + panels_per_page]

        for slot, image_path in enumerate(batch):
            image = ImageReader(str(image_path))
            image_width, image_height = image.getSize()
            x, y = grid.cell_origin(slot)

            # Layout guide, fully transparent
            pdf.saveState()
            pdf.setFillAlpha(0)
            pdf.setStrokeAlpha(0)
            pdf.setLineWidth(1)
            pdf.rect(x, y, grid.cell_width, grid.cell_height, stroke=1, fill=1)
            pdf.restoreState()

            dx, dy, draw_width, draw_height = grid.fit_image(slot, image_width, image_height)
            pdf.drawImage(image, dx, dy, width=draw_width, height=draw_height)

        label = str(page_number)
        pdf.setFont(PAGE_NUMBER_FONT, PAGE_NUMBER_SIZE)
        pdf.setFillColorRGB(0.2, 0.2, 0.2)
        pdf.drawString(
            PAGE_WIDTH - MARGIN - stringWidth(label, PAGE_NUMBER_FONT, PAGE_NUMBER_SIZE),
            PAGE_NUMBER_Y,
            label,
        )
        pdf.showPage()

    pdf.save()
    logger.info(f"Comic PDF written: {pdf_path} ({len(panel_paths)} panels)")
    return pdf_path
