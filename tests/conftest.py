# tests/conftest.py
import numpy as np
import pandas as pd
import pytest
import torch


@pytest.fixture(autouse=True)
def seeded():
    torch.manual_seed(0)
    np.random.seed(0)
    yield


@pytest.fixture
def rng():
    return np.random.default_rng(7)


@pytest.fixture
def linear_data(rng):
    """
    100 rows, 5 features in [0, 1); target is an exact linear function of
    feature 0 with no noise.
    """
    features = rng.random((100, 5)).astype(np.float32)
    targets = (2.0 * features[:, 0] + 1.0).astype(np.float32)
    return features, targets


@pytest.fixture
def metadata_df(rng):
    """Raw metadata table as it comes out of the upstream export."""
    n = 50
    return pd.DataFrame({
        "video_id": [f"vid{i:03d}" for i in range(n)],
        "title": [f"title {i}" for i in range(n)],
        "duration_sec": rng.integers(10, 3600, n),
        "like_count": rng.integers(0, 10_000, n),
        "comment_count": rng.integers(0, 500, n),
        "is_short": rng.random(n) < 0.3,
        "view_count": rng.integers(0, 1_000_000, n),
    })
