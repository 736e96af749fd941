"""
Regression metrics for log1p(view) predictions.
"""

import math

import numpy as np
import torch
import torch.nn.functional as F
from scipy.stats import pearsonr


def _as_float64(values) -> torch.Tensor:
    if isinstance(values, torch.Tensor):
        return values.detach().to(torch.float64)
    return torch.as_tensor(values, dtype=torch.float64)


def mse_loss(pred: torch.Tensor, true: torch.Tensor) -> torch.Tensor:
    """Mean squared error, kept as a tensor so it can be backpropagated."""
    return F.mse_loss(pred, true)


def rmse(pred, true) -> float:
    """
    Root mean squared error.

    Returns +inf when any prediction difference is NaN or infinite, so a
    single unstable prediction shows up in the reported metric instead of
    silently turning a running sum into NaN.
    """
    diff = _as_float64(pred) - _as_float64(true)

    if not torch.isfinite(diff).all():
        return math.inf
    return torch.sqrt(torch.mean(diff ** 2)).item()


def pearson(x, y) -> float:
    """Pearson correlation between two equal-length sequences."""
    x = np.asarray(x, dtype=np.float64).reshape(-1)
    y = np.asarray(y, dtype=np.float64).reshape(-1)

    if len(x) != len(y):
        raise ValueError(f"pearson needs equal lengths, got {len(x)} and {len(y)}")
    if len(x) < 2:
        raise ValueError("pearson needs at least two samples")

    return float(pearsonr(x, y)[0])


def to_original_scale(values):
    """Invert the log1p target transform back to view counts."""
    return np.expm1(np.asarray(values, dtype=np.float64))
