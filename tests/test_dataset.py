import math

import numpy as np
import pytest
import torch

from view_predictor.dataset import BatchSource, ViewCountDataset


def _rows(n, d=3):
    features = np.arange(n * d, dtype=np.float32).reshape(n, d)
    targets = np.arange(n, dtype=np.float32)
    return features, targets


@pytest.mark.parametrize("n,batch_size", [(1, 1), (5, 2), (32, 32), (33, 32), (100, 32), (7, 10)])
def test_batch_count_and_last_batch_size(n, batch_size):
    source = BatchSource(*_rows(n), batch_size=batch_size)
    sizes = [targets.shape[0] for _, targets in source]

    assert len(sizes) == math.ceil(n / batch_size) == len(source)
    assert sizes[-1] == (n - batch_size * (n // batch_size) or batch_size)
    assert all(size == batch_size for size in sizes[:-1])


@pytest.mark.parametrize("shuffle", [False, True])
def test_pass_covers_every_row_once(shuffle):
    source = BatchSource(*_rows(45), batch_size=8, shuffle=shuffle)
    seen = torch.cat([targets for _, targets in source])
    assert sorted(seen.tolist()) == list(range(45))


def test_features_and_targets_stay_paired_when_shuffled():
    features, targets = _rows(20, d=2)
    source = BatchSource(features, targets, batch_size=6, shuffle=True)
    for batch_features, batch_targets in source:
        # row i holds [2i, 2i + 1]
        assert torch.equal(batch_features[:, 0], batch_targets * 2)


def test_unshuffled_pass_is_stored_order_and_repeatable():
    source = BatchSource(*_rows(10), batch_size=3, shuffle=False)
    first = torch.cat([t for _, t in source]).tolist()
    second = torch.cat([t for _, t in source]).tolist()
    assert first == second == list(range(10))


def test_shuffled_passes_are_different_permutations():
    features, targets = _rows(50)
    source = BatchSource(features, targets, batch_size=16, shuffle=True)
    first = torch.cat([t for _, t in source]).tolist()
    second = torch.cat([t for _, t in source]).tolist()

    assert sorted(first) == sorted(second)
    assert first != second


def test_shuffling_does_not_reorder_stored_rows():
    features, targets = _rows(12)
    source = BatchSource(features, targets, batch_size=5, shuffle=True)
    list(source)
    assert source.dataset.targets.tolist() == targets.tolist()


def test_empty_partition_is_rejected():
    with pytest.raises(ValueError, match="empty partition"):
        BatchSource(np.empty((0, 4), dtype=np.float32), np.empty(0, dtype=np.float32))


def test_invalid_batch_size_is_rejected():
    with pytest.raises(ValueError):
        BatchSource(*_rows(4), batch_size=0)


def test_dataset_rejects_row_count_mismatch():
    with pytest.raises(ValueError, match="row count"):
        ViewCountDataset(np.zeros((4, 2)), np.zeros(3))


def test_dataset_rejects_one_dimensional_features():
    with pytest.raises(ValueError, match="2-D"):
        ViewCountDataset(np.zeros(4), np.zeros(4))


def test_source_exposes_shape():
    source = BatchSource(*_rows(9, d=4), batch_size=4)
    assert source.num_samples == 9
    assert source.n_features == 4
