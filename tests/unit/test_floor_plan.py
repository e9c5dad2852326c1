from types import SimpleNamespace

from src.application.floor_plan import auto_layout, column_count, plan_positions


def _booth(booth_id, number, location=None, event=None, x=None, y=None):
    return SimpleNamespace(
        id=booth_id,
        booth_number=number,
        location=location,
        event=event,
        position_x=x,
        position_y=y,
    )


def test_column_count_fits_default_canvas():
    assert column_count() == 10


def test_column_count_never_below_one():
    assert column_count(canvas_width=50) == 1


def test_first_booth_sits_at_padding():
    placements = auto_layout([_booth("1", "A-1", location="Hall A")])

    assert len(placements) == 1
    assert (placements[0].x, placements[0].y) == (40, 40)


def test_booths_wrap_after_ten_columns():
    booths = [_booth(str(i), f"A-{i:02d}", location="Hall A") for i in range(11)]

    placements = {p.booth_id: p for p in auto_layout(booths)}

    assert (placements["9"].x, placements["9"].y) == (40 + 9 * 90, 40)
    assert (placements["10"].x, placements["10"].y) == (40, 40 + 70)


def test_second_hall_is_offset_and_keeps_global_index():
    booths = [
        _booth("b1", "B-1", location="Hall B"),
        _booth("a1", "A-1", location="Hall A"),
    ]

    placements = {p.booth_id: p for p in auto_layout(booths)}

    assert (placements["a1"].x, placements["a1"].y) == (40, 40)
    assert (placements["b1"].x, placements["b1"].y) == (130, 190)


def test_missing_hall_sorts_first_as_default_hall():
    booths = [
        _booth("a1", "A-1", location="Hall A"),
        _booth("n1", "N-1", location=None),
    ]

    placements = {p.booth_id: p for p in auto_layout(booths)}

    assert placements["n1"].y == 40
    assert placements["a1"].y == 40 + 150


def test_positioned_booths_are_not_moved():
    booths = [
        _booth("fixed", "A-1", location="Hall A", x=500, y=300),
        _booth("new", "A-2", location="Hall A"),
    ]

    placements = auto_layout(booths)

    assert [p.booth_id for p in placements] == ["new"]
    assert (placements[0].x, placements[0].y) == (40, 40)


def test_plan_positions_mixes_stored_and_computed_points():
    fixed = _booth("fixed", "A-1", location="Hall A", x=500, y=300)
    fresh = _booth("new", "A-2", location="Hall A")

    positions = plan_positions([fixed, fresh])

    assert positions[0] == (fixed, 500, 300)
    assert positions[1] == (fresh, 40, 40)
    assert fresh.position_x is None
