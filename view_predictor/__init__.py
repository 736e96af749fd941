"""
View Predictor - View Count Regression
======================================

An exploratory regression pipeline predicting log-transformed video view counts
from numeric metadata with a small feed-forward network.

Modules:
--------
- config: Default hyperparameters and paths
- preprocessing: Data loading, numeric feature selection, log transform, train/test split
- dataset: Torch dataset and restartable batch source
- metrics: MSE / RMSE (non-finite guarded) and Pearson correlation
- train_regressor: MLP regressor and the epoch training loop
- evaluate: Post-training prediction pass and correlation report
"""

__version__ = "1.0.0"
__author__ = "Krithomedh"
