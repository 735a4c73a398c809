import numpy as np
import pytest

from ecotrack.train_filter import (
    JointTrain,
    build_preconditioner,
    build_projection_preconditioner,
    build_rhs,
    compute_feature_multiply,
    compute_feature_multiply2,
    dot_divide_joint,
    filter_symmetrize,
    inner_product,
    inner_product_joint,
)


def _rand(rng, shape):
    return rng.standard_normal(shape) + 1j * rng.standard_normal(shape)


def _features(rng, shapes, channels):
    return [[_rand(rng, s) for _ in range(c)] for s, c in zip(shapes, channels)]


@pytest.fixture
def rng():
    return np.random.default_rng(7)


def test_compute_feature_multiply_sums_channels(rng):
    a = _features(rng, [(3, 2), (5, 3)], [2, 3])
    b = _features(rng, [(3, 2), (5, 3)], [2, 3])
    result = compute_feature_multiply(a, b)
    assert len(result) == 2
    np.testing.assert_allclose(result[0], a[0][0] * b[0][0] + a[0][1] * b[0][1])
    assert result[1].shape == (5, 3)


def test_compute_feature_multiply_size_mismatch(rng):
    a = _features(rng, [(3, 2)], [1])
    b = _features(rng, [(3, 2), (3, 2)], [1, 1])
    with pytest.raises(ValueError):
        compute_feature_multiply(a, b)


def test_compute_feature_multiply2_conjugates_left(rng):
    a = _features(rng, [(3, 2)], [2])
    y = [_rand(rng, (3, 2))]
    result = compute_feature_multiply2(a, y)
    np.testing.assert_allclose(result[0][1], np.conj(a[0][1]) * y[0])


def test_inner_product_small_value():
    a = [[np.array([[2.0 + 0j]])]]
    b = [[np.array([[3.0 + 0j]])]]
    # One column that is also the last one: 2*6 - 6.
    assert inner_product(a, b) == pytest.approx(6.0)


def test_inner_product_nonnegative_and_symmetric(rng):
    a = _features(rng, [(5, 3)], [2])
    b = _features(rng, [(5, 3)], [2])
    assert inner_product(a, a) >= 0
    assert inner_product(a, b) == pytest.approx(inner_product(b, a))


def test_inner_product_joint_adds_projection_term(rng):
    filt = _features(rng, [(3, 2)], [2])
    proj = [_rand(rng, (4, 2))]
    joint = JointTrain(filt, proj)
    expected = inner_product(filt, filt) + float(np.sum(np.abs(proj[0]) ** 2))
    assert inner_product_joint(joint, joint) == pytest.approx(expected)


def test_dot_divide_joint_round_trip(rng):
    a = JointTrain(_features(rng, [(3, 2)], [2]), [_rand(rng, (4, 2))])
    b = JointTrain(_features(rng, [(3, 2)], [2]), [_rand(rng, (4, 2))])
    q = dot_divide_joint(a, b)
    np.testing.assert_allclose(q.part1[0][1] * b.part1[0][1], a.part1[0][1])
    np.testing.assert_allclose(q.part2[0] * b.part2[0], a.part2[0])


def test_joint_train_arithmetic_round_trip(rng):
    a = JointTrain(_features(rng, [(3, 2)], [2]), [_rand(rng, (4, 2))])
    b = JointTrain(_features(rng, [(3, 2)], [2]), [_rand(rng, (4, 2))])
    back = (a + b) - b
    np.testing.assert_allclose(back.part1[0][0], a.part1[0][0])
    np.testing.assert_allclose(back.part2[0], a.part2[0])
    doubled = a * 2.0
    np.testing.assert_allclose(doubled.part2[0], 2.0 * a.part2[0])


def test_filter_symmetrize_mirrors_last_column(rng):
    hf = _features(rng, [(5, 3)], [2])
    out = filter_symmetrize(hf)
    for mat in out[0]:
        for r in (3, 4):
            assert mat[r, -1] == pytest.approx(np.conj(mat[4 - r, -1]))
        np.testing.assert_allclose(mat[:3, :], hf[0][0 if mat is out[0][0] else 1][:3, :])
    # Input is left untouched.
    assert not np.allclose(hf[0][0][3:, -1], out[0][0][3:, -1])


def test_filter_symmetrize_rejects_even_rows(rng):
    with pytest.raises(ValueError):
        filter_symmetrize(_features(rng, [(4, 3)], [1]))


def test_build_rhs_single_sample_matches_multiply2(rng):
    sample = _features(rng, [(3, 2)], [2])
    y = [_rand(rng, (3, 2))]
    rhs = build_rhs([sample], [1.0], y)
    np.testing.assert_allclose(rhs[0][0], compute_feature_multiply2(sample, y)[0][0])


def test_build_rhs_is_linear_in_weights(rng):
    s1 = _features(rng, [(3, 2)], [1])
    s2 = _features(rng, [(3, 2)], [1])
    y = [_rand(rng, (3, 2))]
    both = build_rhs([s1, s2], [0.25, 0.75], y)
    one = build_rhs([s1], [0.25], y)
    two = build_rhs([s2], [0.75], y)
    np.testing.assert_allclose(both[0][0], one[0][0] + two[0][0])


def test_build_preconditioner_extremes(rng):
    energy = [[np.abs(_rand(rng, (3, 2))) for _ in range(3)]]
    pure = build_preconditioner(energy, [5.0], 1.0, 0.0)
    np.testing.assert_allclose(pure[0][2], energy[0][2])
    mean_only = build_preconditioner(energy, [5.0], 0.0, 0.0)
    np.testing.assert_allclose(mean_only[0][0], mean_only[0][1])
    reg_only = build_preconditioner(energy, [5.0], 0.5, 1.0)
    np.testing.assert_allclose(reg_only[0][0], np.full((3, 2), 5.0))


def test_build_projection_preconditioner(rng):
    proj = [np.abs(_rand(rng, (4, 2)))]
    out = build_projection_preconditioner(proj, 1, 0.0)
    np.testing.assert_allclose(out[0], proj[0])
    scaled = build_projection_preconditioner(proj, 2, 1.0)
    np.testing.assert_allclose(scaled[0], 2 * (proj[0] + 1.0))