"""Compact sample space: a fixed set of weighted, merged training samples."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import numpy as np

MAX_DIST = 1e10
_MIN_SAMPLE_WEIGHT = 0.0036

Sample = list[list[np.ndarray]]


def _copy_sample(sample: Sequence[Sequence[np.ndarray]]) -> Sample:
    return [[np.array(mat, dtype=np.complex128, copy=True) for mat in feat] for feat in sample]


class SampleSpace:
    """Keeps at most ``sample_num`` samples with prior weights.

    New samples are inserted while there is room. Once full, a new sample
    either replaces one whose weight has become negligible, is merged with
    its nearest stored sample, or takes the place freed by merging the two
    closest stored samples.

    ``filter_sizes`` holds one ``(height, width)`` pair per feature; each
    stored channel has shape ``(height, (width + 1) // 2)``. ``inner_product``
    maps two samples to their (complex) inner product.
    """

    def __init__(
        self,
        filter_sizes: Sequence[tuple[int, int]],
        feature_dims: Sequence[int],
        sample_num: int,
        learning_rate: float,
        inner_product: Callable[[Sample, Sample], complex],
    ) -> None:
        if sample_num <= 0:
            raise ValueError("sample_num must be positive")
        if len(filter_sizes) < len(feature_dims):
            raise ValueError("one filter size is needed per feature")
        self._sample_num = sample_num
        self._learning_rate = float(learning_rate)
        self._inner_product = inner_product
        self._new_sample_id = -1
        self._merged_sample_id = -1
        self._training_sample_num = 0
        self._distance_mat = np.zeros((sample_num, sample_num), dtype=np.complex128)
        self._gram_mat = np.zeros((sample_num, sample_num), dtype=np.complex128)
        self._weights = np.zeros(sample_num, dtype=np.float64)
        self._samples: list[Sample] = [
            [
                [
                    np.zeros((height, (width + 1) // 2), dtype=np.complex128)
                    for _ in range(dim)
                ]
                for (height, width), dim in zip(filter_sizes, feature_dims)
            ]
            for _ in range(sample_num)
        ]

    def update_sample_space_model(self, new_sample: Sample) -> None:
        """Add a new sample to the space, merging or replacing when full."""
        new_sample = _copy_sample(new_sample)
        lr = self._learning_rate
        gram_vec = np.array(
            [2.0 * self._inner_product(new_sample, s) for s in self._samples],
            dtype=np.complex128,
        )
        new_sample_norm = float(np.real(2.0 * self._inner_product(new_sample, new_sample)))

        distance = np.full(self._sample_num, MAX_DIST, dtype=np.complex128)
        for n in range(self._training_sample_num):
            temp = new_sample_norm + self._gram_mat[n, n] - 2.0 * gram_vec[n]
            distance[n] = temp if temp.real > 0 else 0

        if self._training_sample_num < self._sample_num:
            position = self._training_sample_num
            self.update_sample_matrix(gram_vec, new_sample_norm, position, -1, 0.0, 1.0)
            if position == 0:
                self._weights[0] = 1.0
            else:
                self._weights[:position] *= 1 - lr
                self._weights[position] = lr
            self._new_sample_id = position
            self._samples[position] = new_sample
            self._training_sample_num += 1
            return

        min_id = int(np.argmin(self._weights))
        if self._weights[min_id] < _MIN_SAMPLE_WEIGHT:
            self.update_sample_matrix(gram_vec, new_sample_norm, min_id, -1, 0.0, 1.0)
            self._weights[min_id] = 0.0
            total = self._weights.sum()
            self._weights *= (1 - lr) / total
            self._weights[min_id] = lr
            self._merged_sample_id = -1
            self._new_sample_id = min_id
            self._samples[min_id] = new_sample
            return

        distance_real = distance.real
        new_min_r = int(np.argmin(distance_real))
        new_sample_min_dist = distance_real[new_min_r]

        # First minimum in column-major order.
        flat = int(np.argmin(self._distance_mat.real.T))
        exist_min_c, exist_min_r = divmod(flat, self._sample_num)
        existing_min_dist = self._distance_mat.real[exist_min_r, exist_min_c]
        if exist_min_r == exist_min_c:
            raise RuntimeError("distance matrix diagonal filled wrongly")

        self._decay_leading_weights()

        if new_sample_min_dist < existing_min_dist:
            merged_id = new_min_r
            self._merged_sample_id = merged_id
            merged = self._merge_samples(
                self._samples[merged_id], new_sample, self._weights[merged_id], lr
            )
            self.update_sample_matrix(
                gram_vec, new_sample_norm, merged_id, -1, self._weights[merged_id], lr
            )
            self._weights[merged_id] += lr
            self._samples[merged_id] = merged
        else:
            if self._weights[exist_min_c] > self._weights[exist_min_r]:
                exist_min_c, exist_min_r = exist_min_r, exist_min_c
            w1 = self._weights[exist_min_c]
            w2 = self._weights[exist_min_r]
            merged = self._merge_samples(
                self._samples[exist_min_c], self._samples[exist_min_r], w1, w2
            )
            self.update_sample_matrix(
                gram_vec, new_sample_norm, exist_min_c, exist_min_r, w1, w2
            )
            self._weights[exist_min_c] += self._weights[exist_min_r]
            self._weights[exist_min_r] = lr
            self._merged_sample_id = exist_min_c
            self._new_sample_id = exist_min_r
            self._samples[exist_min_c] = merged
            self._samples[exist_min_r] = new_sample

    def update_sample_matrix(
        self,
        gram_vector: np.ndarray,
        new_sample_norm: float,
        id1: int,
        id2: int,
        w1: float,
        w2: float,
    ) -> None:
        """Update the Gram and distance matrices after an insertion or merge.

        With ``id2 < 0`` the new sample is merged into slot ``id1``;
        otherwise slots ``id1`` and ``id2`` are merged into ``id1`` and the
        new sample takes slot ``id2``.
        """
        gram = self._gram_mat
        gram_vector = np.array(gram_vector, dtype=np.complex128, copy=True)
        alpha1 = w1 / (w1 + w2)
        alpha2 = 1 - alpha1

        if id2 < 0:
            norm_id1 = gram[id1, id1]
            column = alpha1 * gram[:, id1] + alpha2 * gram_vector
            gram[:, id1] = column
            gram[id1, :] = column
            gram[id1, id1] = (
                alpha1**2 * norm_id1.real
                + alpha2**2 * new_sample_norm
                + 2 * alpha1 * alpha2 * gram_vector[id1].real
            )
            self._refresh_distances(id1)
            return

        norm_id1 = gram[id1, id1]
        norm_id2 = gram[id2, id2]
        ip_id1_id2 = gram[id1, id2]
        column = alpha1 * gram[:, id1] + alpha2 * gram[:, id2]
        gram[:, id1] = column
        gram[id1, :] = column
        gram[id1, id1] = (
            alpha1**2 * norm_id1.real
            + alpha2**2 * norm_id2.real
            + 2 * alpha1 * alpha2 * ip_id1_id2.real
        )
        gram_vector[id1] = alpha1 * gram_vector[id1] + alpha2 * gram_vector[id2]

        gram[:, id2] = gram_vector
        gram[id2, :] = gram_vector
        gram[id2, id2] = new_sample_norm

        for idx in (id1, id2):
            self._refresh_distances(idx)

    def replace_sample(self, new_sample: Sample, idx: int) -> None:
        """Store ``new_sample`` in slot ``idx``."""
        self._samples[idx] = _copy_sample(new_sample)

    def set_gram_matrix(self, r: int, c: int, val: float) -> None:
        """Set one entry of the Gram matrix."""
        self._gram_mat[r, c] = val

    def weights(self) -> list[float]:
        """Return the prior weights of the stored samples."""
        return [float(w) for w in self._weights]

    def samples(self) -> list[Sample]:
        """Return the stored samples."""
        return list(self._samples)

    def _refresh_distances(self, idx: int) -> None:
        gram = self._gram_mat
        temp = gram[idx, idx] + np.diag(gram) - 2.0 * gram[:, idx]
        distance = np.where(temp.real > 0, temp, 0)
        self._distance_mat[:, idx] = distance
        self._distance_mat[idx, :] = distance
        self._distance_mat[idx, idx] = MAX_DIST

    def _decay_leading_weights(self) -> None:
        # The decay stops at the first index not below its own weight.
        i = 0
        while i < self._sample_num and i < self._weights[i]:
            self._weights[i] *= 1 - self._learning_rate
            i += 1

    @staticmethod
    def _merge_samples(sample1: Sample, sample2: Sample, w1: float, w2: float) -> Sample:
        alpha1 = w1 / (w1 + w2)
        alpha2 = 1 - alpha1
        return [
            [alpha1 * m1 + alpha2 * m2 for m1, m2 in zip(f1, f2)]
            for f1, f2 in zip(sample1, sample2)
        ]