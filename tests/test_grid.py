import itertools

import pytest

from cattetris.errors import InvalidPlacement
from cattetris.grid import Board, ClearResult, apply_clears, can_place, detect_clears, preview_clear
from cattetris.pieces import CATALOG

from tests.conftest import board_from_rows, make_piece


def test_bounds_and_emptiness():
    board = Board()
    assert board.in_bounds(0, 0) and board.in_bounds(8, 8)
    assert not board.in_bounds(9, 0) and not board.in_bounds(0, -1)
    assert board.is_empty(4, 4)
    with pytest.raises(IndexError):
        board.is_empty(9, 9)


def test_place_sets_occupancy_and_color():
    board = Board()
    piece = make_piece([[1, 1], [0, 1]], color="#FF0000")
    board.place(piece, 3, 4)
    assert not board.is_empty(3, 4) and not board.is_empty(4, 4) and not board.is_empty(4, 5)
    assert board.is_empty(3, 5)
    assert board.colors[4, 3] == "#FF0000"
    assert board.colors[5, 3] is None
    assert board.filled_count() == 3


def test_place_rejects_invalid_anchor_without_mutation(dot):
    board = Board()
    board.place(dot, 0, 0)
    before = board.copy()
    with pytest.raises(InvalidPlacement):
        board.place(dot, 0, 0)
    with pytest.raises(InvalidPlacement):
        board.place(dot, -1, 0)
    assert board == before


def test_color_invariant_holds_after_clear():
    board = board_from_rows("", "#########")
    board.place(make_piece([[1], [1]]), 2, 2)
    apply_clears(board, detect_clears(board))
    filled = board.occupancy == 1
    has_color = board.colors != None  # noqa: E711
    assert (filled == has_color).all()


@pytest.mark.parametrize("piece", CATALOG, ids=lambda p: p.id)
def test_can_place_false_when_any_cell_outside(piece):
    board = Board()
    width, height = piece.get_size()
    for x, y in itertools.product(range(-5, 14), repeat=2):
        inside = all(0 <= x + dx < 9 and 0 <= y + dy < 9 for dx, dy in piece.cells)
        assert can_place(board, piece, x, y) == inside
    assert can_place(board, piece, 9 - width, 9 - height)
    assert not can_place(board, piece, 10 - width, 0)


def test_can_place_is_false_after_placing_same_piece():
    board = board_from_rows("#.#.#", "", ".....#")
    piece = make_piece([[1, 1], [1, 0]])
    for x, y in itertools.product(range(9), repeat=2):
        if can_place(board, piece, x, y):
            trial = board.copy()
            trial.place(piece, x, y)
            assert not can_place(trial, piece, x, y)


def test_can_place_does_not_mutate(dot):
    board = board_from_rows("##")
    before = board.copy()
    can_place(board, dot, 0, 0)
    can_place(board, dot, 100, -100)
    assert board == before


def test_detect_clears_empty_board():
    result = detect_clears(Board())
    assert result == ClearResult()
    assert result.is_empty and result.lines == 0


def test_detect_single_row():
    board = board_from_rows("", "", "", "", "#########")
    result = detect_clears(board)
    assert result.rows == {4}
    assert result.columns == frozenset()
    assert result.regions == frozenset()
    assert result.lines == 1


def test_detect_single_column():
    board = board_from_rows(*(["......#"] * 9))
    result = detect_clears(board)
    assert result == ClearResult(columns=frozenset({6}))


def test_detect_region_anchor():
    board = board_from_rows("", "", "", "...###", "...###", "...###")
    assert detect_clears(board) == ClearResult(regions=frozenset({(3, 3)}))


def test_all_region_anchors():
    assert Board().region_anchors() == [
        (0, 0), (3, 0), (6, 0),
        (0, 3), (3, 3), (6, 3),
        (0, 6), (3, 6), (6, 6),
    ]


def test_overlapping_row_column_region_all_reported():
    rows = ["#########", "###", "###"] + ["#"] * 6
    board = board_from_rows(*rows)
    result = detect_clears(board)
    assert result.rows == {0}
    assert result.columns == {0}
    assert result.regions == {(0, 0)}
    assert result.lines == 3
    # union of a row, a column and a region sharing the top-left corner
    assert len(result.cells(board.size, board.region_size)) == 9 + 8 + 4


def test_apply_clears_empties_reported_cells_and_keeps_others():
    rows = ["#########", "#..#", "#", "#", "#", "#", "#", "#", "#.......#"]
    board = board_from_rows(*rows)
    result = detect_clears(board)
    assert result.rows == {0} and result.columns == {0}
    cleared = apply_clears(board, result)
    for x, y in cleared:
        assert board.is_empty(x, y)
    assert not board.is_empty(3, 1)
    assert not board.is_empty(8, 8)
    assert board.filled_count() == 2


def test_apply_clears_with_empty_result_is_noop():
    board = board_from_rows("#.#")
    before = board.copy()
    assert apply_clears(board, ClearResult()) == set()
    assert board == before


def test_preview_reports_completion_without_mutation(dot):
    board = board_from_rows("########.")
    before = board.copy()
    result = preview_clear(board, dot, 8, 0)
    assert result == ClearResult(rows=frozenset({0}))
    assert board == before


def test_preview_invalid_placement_is_empty(dot):
    board = board_from_rows("#")
    before = board.copy()
    assert preview_clear(board, dot, 0, 0).is_empty
    assert preview_clear(board, dot, -3, 20).is_empty
    assert board == before


def test_copy_is_independent(dot):
    board = Board()
    clone = board.copy()
    clone.place(dot, 0, 0)
    assert board.is_empty(0, 0)
    assert board != clone


def test_from_lists_roundtrip_keeps_colors():
    board = Board()
    board.place(make_piece([[1, 1]], color="#ABCDEF"), 2, 2)
    grid, colors = board.to_lists()
    assert Board.from_lists(grid, colors) == board


def test_clear_cells_rejects_cells_off_the_board():
    board = board_from_rows("#.......#", "", "", "", "", "", "", "", "........#")
    before = board.copy()
    for cells in ([(-1, 0)], [(0, -1)], [(9, 0)], [(0, 0), (8, 9)]):
        with pytest.raises(IndexError):
            board.clear_cells(cells)
    assert board == before
    board.clear_cells([(0, 0)])
    assert board.is_empty(0, 0)
    assert not board.is_empty(8, 8)


def test_from_lists_rejects_mismatched_colors():
    grid, colors = board_from_rows("##").to_lists()
    colors[0] = []
    with pytest.raises(ValueError):
        Board.from_lists(grid, colors)
    with pytest.raises(ValueError):
        Board.from_lists(grid, colors[:8])


def test_board_size_must_fit_regions():
    with pytest.raises(ValueError):
        Board(size=8, region_size=3)


def test_to_dict_is_sorted():
    result = ClearResult(rows=frozenset({5, 1}), regions=frozenset({(6, 0), (0, 3)}))
    assert result.to_dict() == {"rows": [1, 5], "columns": [], "regions": [[0, 3], [6, 0]]}
