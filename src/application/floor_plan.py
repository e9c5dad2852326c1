"""Grid placement for booths on the floor-plan canvas.

Booths that already carry coordinates keep them. The rest are sorted by
hall, event and booth number and laid out row by row; every hall starts
a fixed vertical band further down the canvas.
"""

from dataclasses import dataclass

CANVAS_WIDTH = 1000
CANVAS_HEIGHT = 500
BOOTH_WIDTH = 60
BOOTH_HEIGHT = 40
PADDING_LEFT = 40
PADDING_TOP = 40
COLUMN_GAP = 30
ROW_GAP = 30
HALL_OFFSET = 150
DEFAULT_HALL = "Default Hall"


@dataclass(frozen=True)
class Placement:
    booth_id: str
    x: float
    y: float


def column_count(canvas_width: int = CANVAS_WIDTH) -> int:
    usable = canvas_width - PADDING_LEFT * 2 + COLUMN_GAP
    return max(1, usable // (BOOTH_WIDTH + COLUMN_GAP))


def needs_position(booth) -> bool:
    return booth.position_x is None or booth.position_y is None


def _layout_key(booth) -> tuple[str, str, str]:
    return (
        (booth.location or "").lower(),
        (booth.event or "").lower(),
        (booth.booth_number or "").lower(),
    )


def auto_layout(booths) -> list[Placement]:
    pending = sorted((b for b in booths if needs_position(b)), key=_layout_key)

    hall_offsets: dict[str, int] = {}
    for booth in pending:
        hall = booth.location or DEFAULT_HALL
        if hall not in hall_offsets:
            hall_offsets[hall] = len(hall_offsets) * HALL_OFFSET

    cols = column_count()
    placements = []
    for index, booth in enumerate(pending):
        row, col = divmod(index, cols)
        x = PADDING_LEFT + col * (BOOTH_WIDTH + COLUMN_GAP)
        y = (
            PADDING_TOP
            + row * (BOOTH_HEIGHT + ROW_GAP)
            + hall_offsets[booth.location or DEFAULT_HALL]
        )
        placements.append(Placement(booth_id=booth.id, x=x, y=y))
    return placements


def plan_positions(booths) -> list[tuple]:
    """Pairs every booth with the point it is drawn at, without persisting."""
    placed = {p.booth_id: p for p in auto_layout(booths)}
    positions = []
    for booth in booths:
        if booth.id in placed:
            point = placed[booth.id]
            positions.append((booth, point.x, point.y))
        else:
            positions.append((booth, booth.position_x, booth.position_y))
    return positions
