"""
Cat Tetris PIL Renderer
Draws session snapshots to images, with an optional clear preview
"""

from PIL import Image, ImageDraw, ImageFont
from typing import Dict, Optional, Set, Tuple
from pathlib import Path
import os

from .grid import ClearResult
from .session import SessionSnapshot


def get_font(size: int):
    font_paths = [
        "C:/Windows/Fonts/arial.ttf",
        "C:/Windows/Fonts/segoeui.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
    ]
    for path in font_paths:
        if os.path.exists(path):
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                pass
    return ImageFont.load_default()


# Colors
COLORS = {
    'bg': (45, 55, 85),
    'grid_bg': (28, 42, 70),
    'empty_cell': (35, 50, 85),
    'region_line': (90, 110, 160),
    'text_white': (255, 255, 255),
    'text_yellow': (255, 220, 80),
    'text_red': (255, 100, 100),
    'highlight_clear': (255, 255, 100),
    'panel_bg': (30, 50, 90),
}

FALLBACK_CELL = (150, 150, 150)


def hex_to_rgb(color: Optional[str]) -> Tuple[int, int, int]:
    if not color or not color.startswith('#') or len(color) != 7:
        return FALLBACK_CELL
    try:
        return tuple(int(color[i:i + 2], 16) for i in (1, 3, 5))
    except ValueError:
        return FALLBACK_CELL


class BoardRenderer:
    """PIL-based renderer for board snapshots"""

    def __init__(self, cell_size: int = 40):
        self.cell_size = cell_size

        self.font_large = get_font(32)
        self.font_small = get_font(16)
        self.font_tiny = get_font(12)

        self.grid_x = 30
        self.grid_y = 80
        self.mini_cell = max(6, cell_size // 4)
        self.panel_height = self.mini_cell * 5 + 20

    def frame_size(self, grid_size: int) -> Tuple[int, int]:
        grid_pixels = self.cell_size * grid_size
        return (grid_pixels + 2 * self.grid_x,
                self.grid_y + grid_pixels + 30 + self.panel_height + 20)

    def render_frame(self, snapshot: SessionSnapshot,
                     preview: Optional[ClearResult] = None) -> Image.Image:
        """Render a single frame from a snapshot"""
        size = len(snapshot.grid)
        img = Image.new('RGB', self.frame_size(size), COLORS['bg'])
        draw = ImageDraw.Draw(img)

        self._draw_header(draw, snapshot, img.width)
        highlighted = preview.cells(size, snapshot.region_size) if preview is not None else set()
        self._draw_grid(draw, snapshot, highlighted)
        self._draw_pieces_panel(draw, snapshot, img.width)

        return img

    def _draw_header(self, draw: ImageDraw.ImageDraw, snap: SessionSnapshot, width: int):
        # explicit offsets instead of anchors, bitmap fallback fonts reject them
        score = f"{snap.score}"
        score_width = draw.textlength(score, font=self.font_large)
        draw.text(((width - score_width) // 2, 15), score,
                  font=self.font_large, fill=COLORS['text_white'])
        draw.text((self.grid_x, 55), f"Level {snap.level}   Lines {snap.lines_cleared}",
                  font=self.font_small, fill=COLORS['text_yellow'])
        if not snap.running:
            over_width = draw.textlength("GAME OVER", font=self.font_small)
            draw.text((width - self.grid_x - over_width, 55), "GAME OVER",
                      font=self.font_small, fill=COLORS['text_red'])

    def _draw_grid(self, draw: ImageDraw.ImageDraw, snap: SessionSnapshot,
                   highlighted: Set[Tuple[int, int]]):
        size = len(snap.grid)
        grid_pixels = self.cell_size * size

        draw.rounded_rectangle(
            [self.grid_x - 5, self.grid_y - 5,
             self.grid_x + grid_pixels + 5, self.grid_y + grid_pixels + 5],
            radius=10, fill=COLORS['grid_bg']
        )

        for y in range(size):
            for x in range(size):
                cx = self.grid_x + x * self.cell_size
                cy = self.grid_y + y * self.cell_size
                cell_rect = [cx + 2, cy + 2, cx + self.cell_size - 2, cy + self.cell_size - 2]

                if snap.grid[y][x]:
                    color = hex_to_rgb(snap.colors[y][x])
                    if (x, y) in highlighted:
                        color = COLORS['highlight_clear']
                    draw.rounded_rectangle(cell_rect, radius=4, fill=color)

                    # 3D effect
                    highlight = tuple(min(255, c + 40) for c in color)
                    draw.line([cx + 3, cy + 3, cx + self.cell_size - 4, cy + 3], fill=highlight, width=2)
                    draw.line([cx + 3, cy + 3, cx + 3, cy + self.cell_size - 4], fill=highlight, width=2)
                else:
                    fill = COLORS['empty_cell']
                    if (x, y) in highlighted:
                        fill = tuple(c // 2 for c in COLORS['highlight_clear'])
                    draw.rounded_rectangle(cell_rect, radius=4, fill=fill)

        # Region separators
        for i in range(snap.region_size, size, snap.region_size):
            offset = i * self.cell_size
            draw.line([self.grid_x + offset, self.grid_y, self.grid_x + offset, self.grid_y + grid_pixels],
                      fill=COLORS['region_line'], width=2)
            draw.line([self.grid_x, self.grid_y + offset, self.grid_x + grid_pixels, self.grid_y + offset],
                      fill=COLORS['region_line'], width=2)

    def _draw_pieces_panel(self, draw: ImageDraw.ImageDraw, snap: SessionSnapshot, width: int):
        """Draw the active set below the grid"""
        size = len(snap.grid)
        panel_y = self.grid_y + self.cell_size * size + 30
        slots = max(3, len(snap.piece_ids))
        panel_width = (width - 2 * self.grid_x) // slots

        for i in range(slots):
            panel_x = self.grid_x + i * panel_width
            draw.rounded_rectangle(
                [panel_x, panel_y, panel_x + panel_width - 10, panel_y + self.panel_height],
                radius=8, fill=COLORS['panel_bg']
            )

            if i >= len(snap.piece_shapes):
                continue

            shape = snap.piece_shapes[i]
            color = hex_to_rgb(snap.piece_colors[i])
            w = len(shape[0]) * self.mini_cell
            h = len(shape) * self.mini_cell
            offset_x = panel_x + (panel_width - 10 - w) // 2
            offset_y = panel_y + (self.panel_height - h) // 2

            for dy, row in enumerate(shape):
                for dx, v in enumerate(row):
                    if not v:
                        continue
                    cx = offset_x + dx * self.mini_cell
                    cy = offset_y + dy * self.mini_cell
                    draw.rounded_rectangle(
                        [cx, cy, cx + self.mini_cell - 1, cy + self.mini_cell - 1],
                        radius=2, fill=color
                    )

    def save_frame(self, snapshot: SessionSnapshot, path: str, **kwargs):
        """Render and save frame to file"""
        img = self.render_frame(snapshot, **kwargs)
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        img.save(path)


def render_ansi(snapshot: SessionSnapshot, preview: Optional[ClearResult] = None) -> str:
    """Render as ASCII art for console; '*' marks cells a preview would clear"""
    size = len(snapshot.grid)
    step = snapshot.region_size
    highlighted = preview.cells(size, step) if preview is not None else set()

    lines = [f"Score: {snapshot.score}  Level: {snapshot.level}  Lines: {snapshot.lines_cleared}"]
    lines.append("    " + " ".join(str(x) for x in range(size)))
    lines.append("  +" + "-" * (size * 2 + 1) + "+")

    for y in range(size):
        row = f"{y} | "
        for x in range(size):
            if (x, y) in highlighted:
                row += "* "
            else:
                row += "# " if snapshot.grid[y][x] else ". "
        row += "|"
        lines.append(row)
        if (y + 1) % step == 0 and y + 1 < size:
            lines.append("  |" + " " * (size * 2 + 1) + "|")

    lines.append("  +" + "-" * (size * 2 + 1) + "+")

    lines.append("Pieces:")
    for i, (piece_id, instance_id, shape) in enumerate(
            zip(snapshot.piece_ids, snapshot.pieces, snapshot.piece_shapes)):
        lines.append(f"  [{i}] {piece_id} ({instance_id})")
        for shape_row in shape:
            lines.append("      " + "".join("# " if v else "  " for v in shape_row).rstrip())

    if snapshot.running:
        lines.append(f"Valid moves: {snapshot.num_valid}")
    else:
        lines.append("GAME OVER")

    return "\n".join(lines)


def snapshot_summary(snapshot: SessionSnapshot) -> Dict:
    return {
        "score": snapshot.score,
        "level": snapshot.level,
        "lines_cleared": snapshot.lines_cleared,
        "pieces_placed": snapshot.pieces_placed,
        "filled": sum(sum(row) for row in snapshot.grid),
        "running": snapshot.running,
    }
