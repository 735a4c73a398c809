"""Building blocks of the filter training: products, preconditioners, symmetry."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

Features = list[list[np.ndarray]]


def _as_complex(mat: np.ndarray) -> np.ndarray:
    return np.asarray(mat, dtype=np.complex128)


@dataclass
class JointTrain:
    """Filter coefficients together with a projection matrix update.

    ``part1`` holds the filter, one list of channel matrices per feature;
    ``part2`` holds one projection matrix per feature.
    """

    part1: Features = field(default_factory=list)
    part2: list[np.ndarray] = field(default_factory=list)

    def _combine(self, other: JointTrain, sign: float) -> JointTrain:
        if len(self.part1) != len(other.part1) or len(self.part2) != len(other.part2):
            raise ValueError("operands have unmatched sizes")
        part1 = [
            [a + sign * b for a, b in zip(fa, fb, strict=True)]
            for fa, fb in zip(self.part1, other.part1)
        ]
        part2 = [a + sign * b for a, b in zip(self.part2, other.part2)]
        return JointTrain(part1, part2)

    def __add__(self, other: JointTrain) -> JointTrain:
        return self._combine(other, 1.0)

    def __sub__(self, other: JointTrain) -> JointTrain:
        return self._combine(other, -1.0)

    def __mul__(self, scale: complex) -> JointTrain:
        return JointTrain(
            [[scale * m for m in feat] for feat in self.part1],
            [scale * m for m in self.part2],
        )

    __rmul__ = __mul__


def compute_feature_multiply(
    a: Sequence[Sequence[np.ndarray]], b: Sequence[Sequence[np.ndarray]]
) -> list[np.ndarray]:
    """Return, per feature, the sum over channels of ``a * b`` elementwise."""
    if len(a) != len(b):
        raise ValueError("two inputs have unmatched size")
    result = []
    for fa, fb in zip(a, b):
        if len(fa) != len(fb):
            raise ValueError("two inputs have unmatched channel counts")
        total = np.zeros_like(_as_complex(fa[0]))
        for ma, mb in zip(fa, fb):
            total = total + _as_complex(ma) * _as_complex(mb)
        result.append(total)
    return result


def compute_feature_multiply2(
    a: Sequence[Sequence[np.ndarray]], b: Sequence[np.ndarray]
) -> Features:
    """Return ``conj(a[i][j]) * b[i]`` for every feature ``i`` and channel ``j``."""
    if len(b) < len(a):
        raise ValueError("one right-hand matrix is needed per feature")
    return [
        [np.conj(_as_complex(m)) * _as_complex(rhs) for m in feat]
        for feat, rhs in zip(a, b)
    ]


def _half_spectrum_product(a: np.ndarray, b: np.ndarray) -> float:
    a = _as_complex(a)
    b = _as_complex(b)
    full = np.sum(np.conj(a) * b).real
    last = np.sum(np.conj(a[:, -1]) * b[:, -1]).real
    return float(2.0 * full - last)


def inner_product(
    a: Sequence[Sequence[np.ndarray]], b: Sequence[Sequence[np.ndarray]]
) -> float:
    """Real inner product of two half-spectrum filters.

    Every column but the last stands for itself and its mirror, so it
    counts twice.
    """
    return sum(
        _half_spectrum_product(ma, mb)
        for fa, fb in zip(a, b)
        for ma, mb in zip(fa, fb)
    )


def inner_product_joint(a: JointTrain, b: JointTrain) -> float:
    """Inner product of joint filter/projection values."""
    total = 0.0
    for i, (fa, fb) in enumerate(zip(a.part1, b.part1)):
        total += sum(_half_spectrum_product(ma, mb) for ma, mb in zip(fa, fb))
        pa = _as_complex(a.part2[i])
        pb = _as_complex(b.part2[i])
        total += float(np.sum(np.conj(pa) * pb).real)
    return total


def dot_divide_joint(a: JointTrain, b: JointTrain) -> JointTrain:
    """Divide both parts of ``a`` elementwise by those of ``b``."""
    part1 = []
    part2 = []
    for i, (fa, fb) in enumerate(zip(a.part1, b.part1)):
        part1.append([_as_complex(ma) / _as_complex(mb) for ma, mb in zip(fa, fb)])
        part2.append(_as_complex(a.part2[i]) / _as_complex(b.part2[i]))
    return JointTrain(part1, part2)


def filter_symmetrize(hf: Sequence[Sequence[np.ndarray]]) -> Features:
    """Make the last column of every channel conjugate symmetric about the DC row.

    Returns new matrices; rows below the DC row are replaced by the
    conjugates of their mirrors above it.
    """
    result: Features = []
    for feat in hf:
        rows = _as_complex(feat[0]).shape[0]
        if rows % 2 == 0:
            raise ValueError("channels must have an odd number of rows")
        dc_ind = (rows + 1) // 2
        channels = []
        for mat in feat:
            out = np.array(mat, dtype=np.complex128, copy=True)
            for r in range(dc_ind, out.shape[0]):
                out[r, -1] = np.conj(out[2 * dc_ind - r - 2, -1])
            channels.append(out)
        result.append(channels)
    return result


def build_rhs(
    samplesf: Sequence[Sequence[Sequence[np.ndarray]]],
    sample_weights: Sequence[float],
    yf: Sequence[np.ndarray],
) -> Features:
    """Right-hand side ``A^H * Gamma * y`` of the filter equations."""
    if not samplesf:
        raise ValueError("at least one sample is needed")
    if len(sample_weights) < len(samplesf):
        raise ValueError("one weight is needed per sample")
    weighted = [
        [_as_complex(m) * sample_weights[0] for m in feat] for feat in samplesf[0]
    ]
    for sample, weight in zip(samplesf[1:], sample_weights[1:]):
        weighted = [
            [_as_complex(m) * weight + acc for m, acc in zip(feat, acc_feat)]
            for feat, acc_feat in zip(sample, weighted)
        ]
    return compute_feature_multiply2(weighted, yf)


def build_preconditioner(
    sample_energy: Sequence[Sequence[np.ndarray]],
    reg_energy: Sequence[float],
    precond_data_param: float,
    precond_reg_param: float,
) -> Features:
    """Diagonal preconditioner blending channel energy, its mean and the regulariser."""
    result: Features = []
    for i, feat in enumerate(sample_energy):
        mats = [_as_complex(m) for m in feat]
        mean = sum(mats, np.zeros_like(mats[0])) / len(mats)
        ones = np.ones_like(mats[0])
        channels = []
        for energy in mats:
            temp = (1 - precond_data_param) * mean + precond_data_param * energy
            temp = temp * (1 - precond_reg_param) + precond_reg_param * reg_energy[i] * ones
            channels.append(temp)
        result.append(channels)
    return result


def build_projection_preconditioner(
    proj_energy: Sequence[np.ndarray],
    precond_proj_param: float,
    projection_reg: float,
) -> list[np.ndarray]:
    """Diagonal preconditioner of the projection matrix update."""
    return [
        precond_proj_param * (_as_complex(e) + projection_reg * np.ones_like(_as_complex(e)))
        for e in proj_energy
    ]