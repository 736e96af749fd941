"""
Data Preprocessing
Load video metadata, keep numeric features, log transform views, split train/test
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.preprocessing import StandardScaler

from . import config


@dataclass(frozen=True)
class FeatureMatrix:
    """Numeric features and log1p(view) targets, split once into train/test."""

    train_features: np.ndarray
    train_targets: np.ndarray
    test_features: np.ndarray
    test_targets: np.ndarray
    feature_cols: List[str]
    scaler: Optional[StandardScaler] = None

    @property
    def n_features(self) -> int:
        return len(self.feature_cols)

    @property
    def n_train(self) -> int:
        return len(self.train_targets)

    @property
    def n_test(self) -> int:
        return len(self.test_targets)


def load_video_metadata(path=config.DATA_PATH):
    """Load the raw video metadata table."""
    print(f"Loading video metadata from {path}...")
    df = pd.read_csv(path)
    print(f"Loaded: {df.shape}")
    return df


def get_feature_columns(df, target_col=config.TARGET_COL, exclude=()):
    """
    Return the numeric feature columns in table order.

    Identifier and text columns drop out because they are not numeric; the
    target and anything listed in `exclude` are removed explicitly.
    """
    numeric_cols = df.select_dtypes(include=["number", "bool"]).columns
    dropped = set(exclude) | {target_col}
    feature_cols = [col for col in numeric_cols if col not in dropped]

    if not feature_cols:
        raise ValueError(
            f"No numeric feature columns left after removing {sorted(dropped)}"
        )
    return feature_cols


def split_train_test(df, train_fraction=config.TRAIN_FRACTION, seed=config.RANDOM_SEED):
    """
    Uniform random train/test split.

    Train rows are a random sample of `train_fraction` of the table; test rows
    are everything else, kept in stored order.
    """
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")

    train = df.sample(frac=train_fraction, random_state=seed)
    test = df.drop(train.index)
    return train, test


def build_feature_matrix(
    df: pd.DataFrame,
    target_col: str = config.TARGET_COL,
    exclude: Sequence[str] = (),
    train_fraction: float = config.TRAIN_FRACTION,
    seed: int = config.RANDOM_SEED,
    scale: bool = True,
) -> FeatureMatrix:
    """
    Preprocessing pipeline:
    1. Validate the target column
    2. Select numeric features
    3. Drop incomplete rows
    4. Log transform the view count
    5. Split train/test
    6. Standardize features (fit on train only)
    """
    print("\n[1/6] Validating input table...")
    if target_col not in df.columns:
        raise ValueError(f"Missing required column in metadata table: {target_col!r}")

    print("\n[2/6] Selecting numeric features...")
    feature_cols = get_feature_columns(df, target_col, exclude)
    print(f"✅ {len(feature_cols)} numeric features: {', '.join(feature_cols)}")

    print("\n[3/6] Dropping incomplete rows...")
    used = df[feature_cols + [target_col]]
    complete = used.dropna()
    n_dropped = len(used) - len(complete)
    if n_dropped:
        print(f"⚠️ Dropped {n_dropped} rows with missing values ({n_dropped / len(used):.2%})")
    else:
        print("✅ No missing values")

    if (complete[target_col] < 0).any():
        n_negative = int((complete[target_col] < 0).sum())
        raise ValueError(f"{target_col!r} has {n_negative} negative values; view counts must be >= 0")

    print("\n[4/6] Applying log transformation to target...")
    complete = complete.assign(_target_log=np.log1p(complete[target_col].astype(float)))
    print(f"  Original mean: {complete[target_col].mean():.2f}, skewness: {complete[target_col].skew():.2f}")
    print(f"  Log mean: {complete['_target_log'].mean():.2f}, skewness: {complete['_target_log'].skew():.2f}")

    print(f"\n[5/6] Splitting train/test (train_fraction={train_fraction}, seed={seed})...")
    train, test = split_train_test(complete, train_fraction, seed)
    if len(train) == 0 or len(test) == 0:
        raise ValueError(
            f"Empty partition after split (train={len(train)}, test={len(test)}); "
            f"need more rows or a different train_fraction"
        )
    print(f"Train size: {len(train)}, Test size: {len(test)}")

    train_features = train[feature_cols].to_numpy(dtype=np.float64)
    test_features = test[feature_cols].to_numpy(dtype=np.float64)

    scaler = None
    if scale:
        print("\n[6/6] Normalizing features...")
        scaler = StandardScaler()
        train_features = scaler.fit_transform(train_features)
        test_features = scaler.transform(test_features)
        print("✅ Features normalized (mean=0, std=1)")
    else:
        print("\n[6/6] Skipping feature normalization")

    return FeatureMatrix(
        train_features=train_features.astype(np.float32),
        train_targets=train["_target_log"].to_numpy(dtype=np.float32),
        test_features=test_features.astype(np.float32),
        test_targets=test["_target_log"].to_numpy(dtype=np.float32),
        feature_cols=feature_cols,
        scaler=scaler,
    )
