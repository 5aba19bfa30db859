"""
Test Helpers
============

Helper functions for common testing operations.
"""

import io
from pathlib import Path
from typing import List, Tuple

from PIL import Image  # type: ignore

__all__ = [
    "RENDERED_DIAGRAM_HTML",
    "UNRENDERED_DIAGRAM_HTML",
    "make_png_bytes",
    "write_diagram",
    "list_pngs",
    "png_size",
]

RENDERED_DIAGRAM_HTML = """<!DOCTYPE html>
<html><body>
<div class="mermaid"><svg width="100" height="100"></svg></div>
</body></html>
"""

UNRENDERED_DIAGRAM_HTML = """<!DOCTYPE html>
<html><body>
<div class="chart">graph TD; A-->B</div>
</body></html>
"""


def make_png_bytes(width: int, height: int, color: Tuple[int, int, int] = (255, 255, 255)) -> bytes:
    """Create a solid-colour PNG of the given size."""
    output = io.BytesIO()
    Image.new("RGB", (width, height), color).save(output, format="PNG")
    return output.getvalue()


def write_diagram(directory: Path, name: str, rendered: bool = True) -> Path:
    """Write a diagram HTML file; unrendered files never produce the ready marker."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(RENDERED_DIAGRAM_HTML if rendered else UNRENDERED_DIAGRAM_HTML, encoding="utf-8")
    return path


def list_pngs(directory: Path) -> List[str]:
    """Sorted names of the PNG files in a directory."""
    return sorted(p.name for p in directory.glob("*.png"))


def png_size(path: Path) -> Tuple[int, int]:
    with Image.open(path) as image:
        return image.size
