"""
Evaluation Module
- One evaluation-mode pass over the held-out partition, in stored order
- Pearson correlation in log space and in original view-count space
- MAE in both spaces for reference
"""

import math

import numpy as np
import torch
from sklearn.metrics import mean_absolute_error
from tqdm import tqdm

from .metrics import pearson, to_original_scale


def _mae(true, pred):
    if not (np.isfinite(true).all() and np.isfinite(pred).all()):
        return math.inf
    return float(mean_absolute_error(true, pred))


def predict_regressor(model, source, device=None, progress=True):
    """Generate predictions for every row of `source`, in source order."""
    if device is None:
        device = next(model.parameters()).device

    predictions = []
    targets = []
    model.eval()

    with torch.no_grad():
        for features, batch_targets in tqdm(source, desc='Predicting', leave=False, disable=not progress):
            preds = model(features.to(device))
            predictions.append(preds.float().cpu().numpy())
            targets.append(batch_targets.numpy())

    return np.concatenate(predictions), np.concatenate(targets)


def evaluate_correlation(model, test_source, device=None, progress=True):
    """
    Correlate predictions with ground truth on the test partition.

    Returns:
        Dictionary with 'log_correlation' and 'linear_correlation' (after
        expm1), plus 'mae_log', 'mae_original' and 'n_samples'
    """
    if test_source.shuffle:
        raise ValueError("Evaluation needs a BatchSource in stored order (shuffle=False)")

    predictions, targets = predict_regressor(model, test_source, device, progress)

    predictions_original = to_original_scale(predictions)
    targets_original = to_original_scale(targets)

    return {
        'log_correlation': pearson(predictions, targets),
        'linear_correlation': pearson(predictions_original, targets_original),
        'mae_log': _mae(targets, predictions),
        'mae_original': _mae(targets_original, predictions_original),
        'n_samples': len(predictions),
    }
