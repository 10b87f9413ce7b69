import io

import pytest

from tsview.alignment_stream import AlignmentKind, AlignmentType
from tsview.renderer import AlignmentRenderResult, MultipairAlignmentRenderer
from tsview.sequence import Character

M = AlignmentType(AlignmentKind.PRIMARY_MATCH)
S = AlignmentType(AlignmentKind.PRIMARY_SUBSTITUTION)
I = AlignmentType(AlignmentKind.PRIMARY_INSERTION)
D = AlignmentType(AlignmentKind.PRIMARY_DELETION)


def chars(text):
    return [Character.new_char(c) for c in text]


def rendered(renderer, names):
    out = io.StringIO()
    renderer.render(out, names)
    return out.getvalue()


def rows(renderer, names):
    out = io.StringIO()
    renderer.render_without_names(out, names)
    return out.getvalue()


def test_parallel_gaps():
    renderer = MultipairAlignmentRenderer("B", chars("GGG"))
    first = renderer.add_aligned_sequence(
        "B", 0, "A", chars("GGGG"), lambda: None, lambda: None, [M, M, I, M], True, False
    )
    second = renderer.add_aligned_sequence(
        "B", 0, "C", chars("GGGG"), lambda: None, lambda: None, [M, M, I, M], True, False
    )
    assert rendered(renderer, ["A", "B", "C"]).strip() == "A: GGGG\nB: GG-G\nC: GGGG"
    assert first == AlignmentRenderResult(0, 3)
    assert second == AlignmentRenderResult(0, 4)


def test_deletion_renders_gap_in_query():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "ACGT")
    renderer.add_aligned_sequence_without_data("B", 0, "A", "AGT", [M, D, M, M], True, False)
    assert rows(renderer, ["B", "A"]) == "ACGT\nA-GT\n"


def test_inverted_insertion_becomes_deletion():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "ACGT")
    renderer.add_aligned_sequence_without_data("B", 0, "A", "AGT", [M, I, M, M], True, True)
    assert rows(renderer, ["B", "A"]) == "ACGT\nA-GT\n"


def test_substitution_lowercases_both_rows():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "ACG")
    renderer.add_aligned_sequence_without_data("B", 0, "A", "ATG", [M, S, M], True, False)
    assert rows(renderer, ["B", "A"]) == "AcG\nAtG\n"


def test_substitution_without_lowercasing():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "ACG")
    renderer.add_aligned_sequence_without_data("B", 0, "A", "ATG", [M, S, M], False, False)
    assert rows(renderer, ["B", "A"]) == "ACG\nATG\n"


def test_offset_pads_with_blanks():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "ACGT")
    result = renderer.add_aligned_sequence_with_default_data(
        "B", 2, "A", "GT", [M, M], True, False
    )
    assert result == AlignmentRenderResult(2, 4)
    assert rows(renderer, ["B", "A"]) == "ACGT\n  GT\n"


def test_empty_alignment_returns_none_and_pads():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "GGG")
    result = renderer.add_aligned_sequence_with_default_data("B", 0, "A", "", [], True, False)
    assert result is None
    assert str(renderer.sequence("A")) == "   "


def test_extend_sequence_pads_other_rows():
    renderer = MultipairAlignmentRenderer.new_without_data("R", "AC")
    renderer.add_aligned_sequence_without_data("R", 0, "Q", "AC", [M, M], True, False)
    renderer.extend_sequence_with_default_data("R", "GT")
    assert rows(renderer, ["R", "Q"]) == "ACGT\nAC  \n"
    assert renderer.column_width() == 4


def test_extend_sequence_with_alignment_replaces_blanks():
    renderer = MultipairAlignmentRenderer.new_without_data("R", "AC")
    renderer.add_aligned_sequence_without_data("R", 0, "Q", "AC", [M, M], True, False)
    renderer.extend_sequence_with_default_data("R", "GT")
    renderer.extend_sequence_with_alignment_and_default_data(
        "R", "Q", 2, "GA", [M, S], True, False
    )
    assert rows(renderer, ["R", "Q"]) == "ACGt\nACGa\n"
    assert renderer.column_width() == 4


def test_insertion_adds_blank_to_unrelated_rows():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "GG")
    renderer.add_aligned_sequence_without_data("B", 0, "X", "GG", [M, M], True, False)
    renderer.add_aligned_sequence_without_data("B", 0, "A", "GTG", [M, I, M], True, False)
    assert rows(renderer, ["A", "B", "X"]) == "GTG\nG-G\nG G\n"


def test_extend_sequence_with_data_generator():
    renderer = MultipairAlignmentRenderer.new_empty()
    renderer.add_empty_independent_sequence("R")
    renderer.add_empty_independent_sequence("Q")
    renderer.extend_sequence("R", [Character.new_char("A", "red")], lambda: "blank")
    assert renderer.sequence("Q")[0].data == "blank"
    assert renderer.sequence("R")[0].data == "red"


def test_render_pads_names():
    renderer = MultipairAlignmentRenderer.new_without_data("Parent", "AC")
    renderer.add_aligned_sequence_without_data("Parent", 0, "C", "AC", [M, M], True, False)
    assert rendered(renderer, ["Parent", "C"]) == "Parent: AC\nC:      AC\n"


def test_render_without_names_requires_nothing():
    renderer = MultipairAlignmentRenderer.new_empty()
    out = io.StringIO()
    renderer.render_without_names(out, [])
    assert out.getvalue() == ""


def test_render_without_any_name_raises():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "A")
    with pytest.raises(ValueError):
        renderer.render(io.StringIO(), [])


def test_duplicate_name_raises():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "A")
    with pytest.raises(ValueError):
        renderer.add_aligned_sequence_without_data("B", 0, "B", "A", [M], True, False)
    with pytest.raises(ValueError):
        renderer.add_empty_independent_sequence("B")


def test_offset_out_of_bounds_raises():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "AC")
    with pytest.raises(ValueError):
        renderer.add_aligned_sequence_without_data("B", 3, "A", "A", [M], True, False)


def test_extension_offset_out_of_bounds_raises():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "AC")
    renderer.add_empty_independent_sequence("Q")
    with pytest.raises(ValueError):
        renderer.extend_sequence_with_alignment_and_default_data(
            "B", "Q", 5, "A", [M], True, False
        )


def test_too_many_characters_raises():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "AC")
    with pytest.raises(ValueError):
        renderer.add_aligned_sequence_without_data("B", 0, "A", "ACG", [M, M], True, False)


def test_too_few_characters_raises():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "AC")
    with pytest.raises(ValueError):
        renderer.add_aligned_sequence_without_data("B", 0, "A", "A", [M, M], True, False)


def test_disallowed_alignment_type_raises():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "AC")
    with pytest.raises(ValueError, match="Not allowed"):
        renderer.add_aligned_sequence_without_data(
            "B", 0, "A", "", [AlignmentType(AlignmentKind.ROOT)], True, False
        )


def test_unknown_sequence_raises():
    renderer = MultipairAlignmentRenderer.new_without_data("B", "AC")
    with pytest.raises(KeyError):
        renderer.sequence("Z")


def test_empty_renderer_column_width_raises():
    with pytest.raises(ValueError):
        MultipairAlignmentRenderer.new_empty().column_width()