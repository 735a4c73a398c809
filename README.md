# ecotrack

Building blocks of an ECO-style (Efficient Convolution Operators) visual
object tracker, written with NumPy, together with a shortest
float-to-decimal-text conversion.

## What is inside

- `ecotrack.sample_space`: `SampleSpace`, the compact sample space model.
  It keeps at most `sample_num` training samples with prior weights and
  maintains their Gram and distance matrices. While there is room, a new
  sample is inserted. Once the space is full, the new sample does one of
  three things. It replaces a sample whose weight has fallen below 0.0036.
  Or it is merged into its nearest stored sample. Or it takes the slot freed
  when the two closest stored samples are merged. `weights()` and
  `samples()` return the current state, and `replace_sample` and
  `set_gram_matrix` let you set entries directly.
- `ecotrack.train_filter`: helpers for filter training.
  - Feature products: `compute_feature_multiply` and
    `compute_feature_multiply2`.
  - Half-spectrum inner products: `inner_product` and
    `inner_product_joint`. Every column but the last counts twice.
  - Preconditioners: `build_preconditioner` and
    `build_projection_preconditioner`.
  - The right-hand side `A^H * Gamma * y`: `build_rhs`.
  - Elementwise division of joint values: `dot_divide_joint`.
  - `filter_symmetrize`, which makes the last column of each channel
    conjugate symmetric about the DC row. Channels must have an odd number
    of rows.
  - `JointTrain`, which holds a filter (`part1`) together with one
    projection matrix per feature (`part2`). It supports `+`, `-` and
    scalar `*`.
- `ecotrack.parameters`: dataclasses for tracker settings, namely
  `HogParameters`, `HogFeatures`, `CgOpts` and `EcoParameters`.
- `ecotrack.timer`: `Timer`, a wall-clock stopwatch. `ms_delay()` returns
  the milliseconds since the last reference point and moves the reference
  point to now. Until `reset()` is called, the reference point is the epoch.
- `ecotrack.json_types`: `ValueType`, the kinds of JSON value. They are
  ordered null < boolean < number < object < array < string, and
  `DISCARDED` compares as neither smaller nor larger than anything.
- `ecotrack.dtoa_grisu` and `ecotrack.dtoa_format`: Grisu2 digit generation
  (`grisu2`, `compute_boundaries`, `DiyFp`, ...) and `to_chars`. `to_chars`
  renders a finite float, in double or single precision, as short text that
  reads back as the same number. It uses `printf("%g")`-like layout and
  keeps a trailing `.0` on whole numbers.

Features follow one layout: a list over feature blocks, each a list of
complex 2-D NumPy arrays, one per feature channel.

## What it does not do

The package has no feature extraction (HOG or deep features), no FFT-based
convolution or interpolation, no feature projection, and no complete
conjugate-gradient training loop. It also has no tracking command or
video/image input. It provides the sample space model, the training helpers
listed above and the settings records. Driving a tracker with them is left
to the caller.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

```python
import numpy as np
from ecotrack.sample_space import SampleSpace
from ecotrack.train_filter import inner_product

space = SampleSpace(
    filter_sizes=[(5, 5)],      # (height, width) per feature block
    feature_dims=[2],
    sample_num=4,
    learning_rate=0.1,
    inner_product=inner_product,
)
sample = [[np.ones((5, 3), dtype=np.complex64) for _ in range(2)]]
space.update_sample_space_model(sample)
print(space.weights())            # [1.0, 0.0, 0.0, 0.0]
```

```python
from ecotrack.dtoa_format import to_chars

print(to_chars(0.1))              # 0.1
print(to_chars(1e20))             # 1e+20
print(to_chars(-0.0))             # -0.0
print(to_chars(0.3, single=True)) # shortest text for the float32 value
```

```python
from ecotrack.timer import Timer

timer = Timer()
timer.reset()
# ... work ...
print(f"{timer.ms_delay():.2f} ms")
```