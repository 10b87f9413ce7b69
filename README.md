# tsview

Tools for working with template switch alignments of DNA sequences:

- `tsview.cost_function.CostFunction`: a step-wise cost function. It has a
  plain-text format (`parse_plain` / `write_plain`), and it can be evaluated
  (`evaluate`), give the minimum over a range of inputs (`min`), and give the
  first and last finite inputs (`minimum_finite_input` / `maximum_finite_input`).
- `tsview.gap_affine.GapAffineAlignmentCostTable`: a gap-affine cost table over
  the alphabet `ACGT`. It is read from and written to a plain-text format
  (`read_plain`, `read_plain_multi`, `write_plain`) and can be lowered to bounds
  (`into_lower_bound`, `into_match_agnostic_lower_bound`).
- `tsview.alignment_stream`: the alignment step types (`AlignmentKind`,
  `AlignmentType`), `AlignmentCoordinates`, and `AlignmentStream`. The stream is a
  sliding window over a run-length encoded alignment. It tracks reference and
  query coordinates across template switches.
- `tsview.template_switches.parse`: splits a run-length encoded alignment into its
  template switches (`TSShow`), each with its upstream and downstream context.
- `tsview.sequence.MultipairAlignmentSequence`: one rendered row of characters,
  gaps (`-`) and blanks (spaces).
- `tsview.renderer.MultipairAlignmentRenderer`: lays out several sequences aligned
  to each other as plain text rows.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from tsview.cost_function import CostFunction
from tsview.gap_affine import GapAffineAlignmentCostTable

_, function = CostFunction.parse_plain("-inf 0 10\n   5 1 inf")
function.evaluate(3)              # 1
function.maximum_finite_input()   # 9

with open("costs.txt") as costs_file:
    tables = GapAffineAlignmentCostTable.read_plain_multi(costs_file)
```

`read_plain` and `read_plain_multi` accept a string, bytes, or an open text file.
`read_plain_multi` returns a dictionary keyed by table name. It raises
`DuplicateCostTableNameError` if a name occurs twice.

Rendering aligned sequences:

```python
import sys

from tsview.alignment_stream import AlignmentKind, AlignmentType
from tsview.renderer import MultipairAlignmentRenderer

renderer = MultipairAlignmentRenderer.new_without_data("B", "GGG")
match = AlignmentType(AlignmentKind.PRIMARY_MATCH)
insertion = AlignmentType(AlignmentKind.PRIMARY_INSERTION)
renderer.add_aligned_sequence_without_data(
    "B", 0, "A", "GGGG", [match, match, insertion, match], True, False
)
renderer.render(sys.stdout, ["A", "B"])
# A: GGGG
# B: GG-G
```

## Errors

Parsing and cost-function errors are raised as subclasses of
`tsview.errors.TsviewError`, for example `ParserError` and
`CostFunctionIndexNotIncreasingError`. Misuse of the stream, the template switch
parser or the renderer raises `ValueError`.

## What it does not do

The package does not compute alignments. It only works on alignments that are
given to it. It has no command-line tool, and it draws no SVG or PNG images. Only
the plain-text rows of `MultipairAlignmentRenderer` are produced.
`tsview.errors` defines `AlignmentHasNoTargetError`,
`NoTsAlignmentHasNoTargetError` and `SvgNegativeAntiPrimaryGapError`, but nothing
in the package raises them.