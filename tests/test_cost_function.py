import io

import pytest

from tsview.cost_function import CostFunction, parse_inf_value
from tsview.errors import CostFunctionIndexNotIncreasingError, ParserError

ISIZE_MIN = -(2**63)
ISIZE_MAX = 2**63 - 1


@pytest.fixture
def cost_function():
    return CostFunction(
        [(2, 100), (3, 1), (4, 2), (6, 1), (8, 3), (70, 2), (100, 100)]
    )


@pytest.mark.parametrize(
    "start, end, end_inclusive, expected",
    [
        (0, 2, False, None),
        (1, 2, False, None),
        (2, 2, False, None),
        (4, 2, False, None),
        (4, 2, True, None),
        (3, 2, True, None),
        (2, 2, True, 100),
        (3, 3, True, 1),
        (4, 4, True, 2),
        (5, 5, True, 2),
        (6, 6, True, 1),
        (2, 3, False, 100),
        (3, 4, False, 1),
        (4, 5, False, 2),
        (5, 6, False, 2),
        (6, 7, False, 1),
        (22, 33, True, 3),
        (22, 33, False, 3),
    ],
)
def test_min_bounded(cost_function, start, end, end_inclusive, expected):
    assert cost_function.min(start, end, end_inclusive=end_inclusive) == expected


def test_min_unbounded(cost_function):
    assert cost_function.min() == 1


@pytest.mark.parametrize(
    "start, expected",
    [
        (0, 1), (1, 1), (2, 1), (3, 1), (4, 1), (5, 1), (6, 1), (7, 1),
        (8, 2), (9, 2), (69, 2), (70, 2), (71, 2), (72, 2), (99, 2),
        (100, 100), (101, 100),
    ],
)
def test_min_from(cost_function, start, expected):
    assert cost_function.min(start=start) == expected


@pytest.mark.parametrize(
    "end, expected",
    [
        (0, None), (1, None), (2, None), (3, 100), (4, 1), (5, 1), (6, 1),
        (7, 1), (8, 1), (9, 1), (69, 1), (70, 1), (71, 1), (72, 1),
        (99, 1), (100, 1), (101, 1),
    ],
)
def test_min_until_exclusive(cost_function, end, expected):
    assert cost_function.min(end=end) == expected


@pytest.mark.parametrize(
    "end, expected",
    [
        (0, None), (1, None), (2, 100), (3, 1), (4, 1), (5, 1), (6, 1),
        (7, 1), (8, 1), (9, 1), (69, 1), (70, 1), (71, 1), (72, 1),
        (99, 1), (100, 1), (101, 1),
    ],
)
def test_min_until_inclusive(cost_function, end, expected):
    assert cost_function.min(end=end, end_inclusive=True) == expected


def test_min_exclusive_start_empty(cost_function):
    assert cost_function.min(2, 3, start_inclusive=False) is None
    assert cost_function.min(start=ISIZE_MAX, start_inclusive=False) is None


def test_simple_example():
    text = "-inf -12345 -4 -1 0 1 +2 123456 inf\n   1      2  3  4 5 6  7      8   9"
    expected_output = (
        "-inf -12345 -4 -1 0 1 2 123456 inf\n   1      2  3  4 5 6 7      8   9"
    )
    expected = CostFunction(
        [
            (ISIZE_MIN, 1),
            (-12345, 2),
            (-4, 3),
            (-1, 4),
            (0, 5),
            (1, 6),
            (2, 7),
            (123456, 8),
            (ISIZE_MAX, 9),
        ]
    )

    rest, parsed = CostFunction.parse_plain(text)
    assert rest == ""
    assert parsed == expected

    writer = io.StringIO()
    parsed.write_plain(writer)
    assert writer.getvalue() == expected_output


def test_write_round_trip_with_infinite_cost():
    function = CostFunction([(ISIZE_MIN, 3), (10, CostFunction.COST_MAX)])
    writer = io.StringIO()
    function.write_plain(writer)
    rest, parsed = CostFunction.parse_plain(writer.getvalue())
    assert rest == ""
    assert parsed == function


def test_parse_rejects_missing_min_index():
    with pytest.raises(ParserError):
        CostFunction.parse_plain("0 1\n1 2")


def test_parse_rejects_length_mismatch():
    with pytest.raises(ParserError):
        CostFunction.parse_plain("-inf 1\n1")


def test_parse_rejects_non_increasing():
    with pytest.raises(ParserError):
        CostFunction.parse_plain("-inf 5 5\n1 2 3")


def test_parse_inf_value():
    assert parse_inf_value("-inf x", -7, 7) == (" x", -7)
    assert parse_inf_value("+inf", -7, 7) == ("", 7)
    assert parse_inf_value("inf", -7, 7) == ("", 7)
    assert parse_inf_value("+2 3", -7, 7) == (" 3", 2)
    assert parse_inf_value("-4", -7, 7) == ("", -4)


def test_parse_inf_value_errors():
    with pytest.raises(ParserError):
        parse_inf_value("", 0, 10)
    with pytest.raises(ParserError):
        parse_inf_value("abc", 0, 10)
    with pytest.raises(ParserError):
        parse_inf_value("-3", 0, 10)
    with pytest.raises(ParserError):
        parse_inf_value("11", 0, 10)


def test_construction_rejects_non_increasing():
    with pytest.raises(CostFunctionIndexNotIncreasingError) as info:
        CostFunction([(0, 1), (2, 2), (2, 3)])
    assert info.value.index == 2


def test_points_round_trip():
    points = [(0, 5), (3, 1)]
    assert CostFunction(points).points == points


def test_evaluate(cost_function):
    assert cost_function.evaluate(2) == 100
    assert cost_function.evaluate(5) == 2
    assert cost_function.evaluate(69) == 3
    assert cost_function.evaluate(1000) == 100
    with pytest.raises(ValueError):
        cost_function.evaluate(1)


def test_new_max():
    function = CostFunction.new_max()
    assert function.evaluate(0) == CostFunction.COST_MAX
    assert function.minimum_finite_input() is None
    assert function.maximum_finite_input() is None


def test_finite_input_bounds():
    maximum = CostFunction.COST_MAX
    function = CostFunction([(ISIZE_MIN, maximum), (-3, 2), (5, maximum)])
    assert function.minimum_finite_input() == -3
    assert function.maximum_finite_input() == 4


def test_maximum_finite_input_open_ended(cost_function):
    assert cost_function.maximum_finite_input() is None
    assert cost_function.minimum_finite_input() == 2