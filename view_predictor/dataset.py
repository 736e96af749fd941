"""
Dataset and Batch Source
- ViewCountDataset: float tensors for one partition (features, log1p views)
- BatchSource: restartable, lazy batch iteration (shuffled for train, stored order for eval)
"""

import math

import numpy as np
import torch
from torch.utils.data import Dataset, DataLoader

from . import config


class ViewCountDataset(Dataset):
    """PyTorch Dataset for view count regression."""

    def __init__(self, features, targets):
        features = np.asarray(features, dtype=np.float32)
        targets = np.asarray(targets, dtype=np.float32).reshape(-1)

        if features.ndim != 2:
            raise ValueError(f"features must be 2-D (rows, columns), got shape {features.shape}")
        if len(features) != len(targets):
            raise ValueError(
                f"features and targets disagree on row count: {len(features)} vs {len(targets)}"
            )

        self.features = torch.from_numpy(features)
        self.targets = torch.from_numpy(targets)

    def __len__(self):
        return len(self.targets)

    def __getitem__(self, idx):
        return self.features[idx], self.targets[idx]


class BatchSource:
    """
    Yields (features, targets) batches covering a partition exactly once per pass.

    Every call to iter() starts an independent pass. With shuffle enabled each
    pass draws a fresh permutation; the stored rows are never reordered.
    """

    def __init__(self, features, targets, batch_size=config.BATCH_SIZE, shuffle=False):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        self.dataset = ViewCountDataset(features, targets)
        if len(self.dataset) == 0:
            raise ValueError("Cannot build a batch source over an empty partition")

        self.batch_size = batch_size
        self.shuffle = shuffle
        self._loader = DataLoader(self.dataset, batch_size=batch_size, shuffle=shuffle)

    @property
    def num_samples(self):
        return len(self.dataset)

    @property
    def n_features(self):
        return self.dataset.features.shape[1]

    def __len__(self):
        return math.ceil(self.num_samples / self.batch_size)

    def __iter__(self):
        return iter(self._loader)
