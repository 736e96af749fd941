"""
View Count Regressor Training Module
- MLP regressor: Linear -> BatchNorm -> ReLU -> Dropout blocks, scalar output per row
- Adam optimizer on per-batch MSE loss
- Per-epoch train/test loss and RMSE, weighted by actual batch size
- Non-finite RMSE is reported as inf; training keeps going
"""

from dataclasses import asdict, dataclass
from typing import List, Sequence

import pandas as pd
import torch
import torch.nn as nn
from torch.optim import Adam
from tqdm import tqdm

from . import config
from .metrics import mse_loss, rmse


class ViewCountRegressor(nn.Module):
    """Feed-forward regressor over numeric video metadata."""

    def __init__(self, n_features, hidden_dims: Sequence[int] = config.HIDDEN_DIMS,
                 dropout=config.DROPOUT_RATE):
        super().__init__()
        layers: List[nn.Module] = []
        prev_dim = n_features
        for hidden_dim in hidden_dims:
            layers.append(nn.Linear(prev_dim, hidden_dim))
            layers.append(nn.BatchNorm1d(hidden_dim))
            layers.append(nn.ReLU())
            layers.append(nn.Dropout(dropout))
            prev_dim = hidden_dim
        layers.append(nn.Linear(prev_dim, 1))
        self.net = nn.Sequential(*layers)

        self.n_features = n_features

    def forward(self, features):
        if features.shape[-1] != self.n_features:
            raise ValueError(
                f"Regressor was built for {self.n_features} features, got {features.shape[-1]}"
            )
        # squeeze(-1) keeps a one-row batch as a 1-element vector
        return self.net(features).squeeze(-1)


@dataclass(frozen=True)
class EpochRecord:
    epoch: int
    train_loss: float
    train_rmse: float
    test_loss: float
    test_rmse: float


class TrainingHistory:
    """Ordered per-epoch records produced by one training run."""

    def __init__(self):
        self._records: List[EpochRecord] = []

    def append(self, record: EpochRecord):
        self._records.append(record)

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def __getitem__(self, idx):
        return self._records[idx]

    @property
    def last(self) -> EpochRecord:
        return self._records[-1]

    @property
    def train_loss(self):
        return [r.train_loss for r in self._records]

    @property
    def train_rmse(self):
        return [r.train_rmse for r in self._records]

    @property
    def test_loss(self):
        return [r.test_loss for r in self._records]

    @property
    def test_rmse(self):
        return [r.test_rmse for r in self._records]

    def to_frame(self) -> pd.DataFrame:
        """One row per epoch, ready for charting."""
        columns = ["epoch", "train_loss", "train_rmse", "test_loss", "test_rmse"]
        return pd.DataFrame([asdict(r) for r in self._records], columns=columns)


def _weighted_mean(total, n_samples):
    if n_samples == 0:
        raise ValueError("Cannot average a metric over zero samples (empty partition)")
    return total / n_samples


def train_one_epoch(model, source, optimizer, device, progress=True):
    """One shuffled pass over the train source with a parameter update per batch."""
    model.train()
    loss_sum = 0.0
    rmse_sum = 0.0
    n_samples = 0

    for features, targets in tqdm(source, desc='Training', leave=False, disable=not progress):
        features = features.to(device)
        targets = targets.to(device)
        batch_size = targets.shape[0]

        optimizer.zero_grad()
        predictions = model(features)
        loss = mse_loss(predictions, targets)
        loss.backward()
        optimizer.step()

        loss_sum += loss.item() * batch_size
        rmse_sum += rmse(predictions, targets) * batch_size
        n_samples += batch_size

    return _weighted_mean(loss_sum, n_samples), _weighted_mean(rmse_sum, n_samples)


def evaluate_epoch(model, source, device, progress=True):
    """One pass over the test source in evaluation mode, no parameter updates."""
    model.eval()
    loss_sum = 0.0
    rmse_sum = 0.0
    n_samples = 0

    with torch.no_grad():
        for features, targets in tqdm(source, desc='Validation', leave=False, disable=not progress):
            features = features.to(device)
            targets = targets.to(device)
            batch_size = targets.shape[0]

            predictions = model(features)
            loss = mse_loss(predictions, targets)

            loss_sum += loss.item() * batch_size
            rmse_sum += rmse(predictions, targets) * batch_size
            n_samples += batch_size

    return _weighted_mean(loss_sum, n_samples), _weighted_mean(rmse_sum, n_samples)


def train_regressor(model, train_source, test_source, epochs=config.EPOCHS,
                    learning_rate=config.LEARNING_RATE, device=None, progress=True):
    """
    Train the regressor for a fixed number of epochs.

    Args:
        model: ViewCountRegressor to train in place
        train_source: Shuffled BatchSource over the train partition
        test_source: Ordered BatchSource over the test partition
        epochs: Number of epochs (no early stopping)
        learning_rate: Adam learning rate
        device: Torch device; CUDA when available if not given
        progress: Show tqdm progress bars

    Returns:
        (model, history) where history holds one EpochRecord per epoch
    """
    if epochs < 1:
        raise ValueError(f"epochs must be >= 1, got {epochs}")
    last_batch = train_source.num_samples % train_source.batch_size or train_source.batch_size
    if last_batch == 1:
        raise ValueError(
            f"Train partition of {train_source.num_samples} rows with batch_size="
            f"{train_source.batch_size} produces a single-row batch; batch normalization "
            f"cannot train on one row. Change batch_size or the split."
        )

    if device is None:
        device = 'cuda' if torch.cuda.is_available() else 'cpu'
    device = torch.device(device)
    model.to(device)

    print(f"Device: {device}")
    if device.type != 'cuda':
        print("⚠️ Training on CPU")

    optimizer = Adam(model.parameters(), lr=learning_rate)
    print(f"✅ Loss: MSE | Optimizer: Adam (lr={learning_rate})")
    print(f"✅ Train batches: {len(train_source)} | Test batches: {len(test_source)}")

    history = TrainingHistory()

    for epoch in range(1, epochs + 1):
        train_loss, train_rmse = train_one_epoch(model, train_source, optimizer, device, progress)
        test_loss, test_rmse = evaluate_epoch(model, test_source, device, progress)

        history.append(EpochRecord(epoch, train_loss, train_rmse, test_loss, test_rmse))
        print(f"Epoch {epoch}/{epochs} | "
              f"Train Loss: {train_loss:.4f}, RMSE: {train_rmse:.4f} | "
              f"Test Loss: {test_loss:.4f}, RMSE: {test_rmse:.4f}")

    return model, history
