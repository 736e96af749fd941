"""
Main Execution Script
Run the complete pipeline from raw video metadata to correlation report.
The network regresses log1p(view count); correlations are reported in log and original space.
"""

import math
import time
from datetime import datetime

import torch

from view_predictor import config
from view_predictor.dataset import BatchSource
from view_predictor.evaluate import evaluate_correlation
from view_predictor.preprocessing import build_feature_matrix, load_video_metadata
from view_predictor.train_regressor import ViewCountRegressor, train_regressor


def print_banner(text):
    """Print formatted banner."""
    print("\n" + "="*70)
    print(f"  {text}")
    print("="*70 + "\n")


def main(data_path=config.DATA_PATH, target_col=config.TARGET_COL, exclude=(),
         epochs=config.EPOCHS, batch_size=config.BATCH_SIZE, learning_rate=config.LEARNING_RATE,
         train_fraction=config.TRAIN_FRACTION, seed=config.RANDOM_SEED, scale=True,
         history_out=None, progress=True):
    """Execute complete pipeline."""
    start_time = time.time()

    print_banner("VIEW COUNT REGRESSION PIPELINE")
    print(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"Target: log1p({target_col})")

    # Phase 1: Check environment
    print_banner("PHASE 1: ENVIRONMENT CHECK")
    print(f"  CUDA available: {torch.cuda.is_available()}")
    if torch.cuda.is_available():
        print(f"  GPU: {torch.cuda.get_device_name(0)}")
    print(f"  PyTorch: {torch.__version__}")

    # Phase 2: Preprocessing
    print_banner("PHASE 2: DATA PREPROCESSING")
    df = load_video_metadata(data_path)
    matrix = build_feature_matrix(
        df,
        target_col=target_col,
        exclude=exclude,
        train_fraction=train_fraction,
        seed=seed,
        scale=scale,
    )

    train_source = BatchSource(matrix.train_features, matrix.train_targets,
                               batch_size=batch_size, shuffle=True)
    test_source = BatchSource(matrix.test_features, matrix.test_targets,
                              batch_size=batch_size, shuffle=False)

    # Phase 3: Training
    print_banner(f"PHASE 3: TRAINING REGRESSOR ({epochs} epochs)")
    model = ViewCountRegressor(n_features=matrix.n_features)
    print(f"Model: MLP {matrix.n_features} -> {' -> '.join(str(d) for d in config.HIDDEN_DIMS)} -> 1")
    model, history = train_regressor(
        model,
        train_source,
        test_source,
        epochs=epochs,
        learning_rate=learning_rate,
        progress=progress,
    )

    if history_out:
        history.to_frame().to_csv(history_out, index=False)
        print(f"✅ Training history saved: {history_out}")

    final = history.last
    if math.isinf(final.train_rmse) or math.isinf(final.test_rmse):
        print("⚠️ Non-finite predictions in the final epoch (RMSE reported as inf)")

    # Phase 4: Evaluation
    print_banner("PHASE 4: EVALUATION (held-out partition)")
    results = evaluate_correlation(model, test_source, progress=progress)

    # Summary
    elapsed_time = time.time() - start_time
    minutes = int(elapsed_time // 60)
    seconds = int(elapsed_time % 60)

    print_banner("PIPELINE COMPLETE!")
    print(f"Total execution time: {minutes}m {seconds}s")
    print(f"Test samples: {results['n_samples']}")
    print(f"Final epoch: Train RMSE: {final.train_rmse:.4f}, Test RMSE: {final.test_rmse:.4f}")
    print(f"\n📊 Correlation (log space):      {results['log_correlation']:.4f}")
    print(f"📊 Correlation (original space): {results['linear_correlation']:.4f}")
    print(f"  MAE (log): {results['mae_log']:.4f}")
    print(f"  MAE (original): {results['mae_original']:.2f}")

    return history, results


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Run view count regression pipeline')
    parser.add_argument('--data', default=config.DATA_PATH, help='Path to the video metadata CSV')
    parser.add_argument('--target-col', default=config.TARGET_COL, help='View count column')
    parser.add_argument('--exclude', nargs='*', default=[], help='Numeric columns to leave out of the features')
    parser.add_argument('--epochs', type=int, default=config.EPOCHS, help='Number of epochs')
    parser.add_argument('--batch-size', type=int, default=config.BATCH_SIZE, help='Batch size')
    parser.add_argument('--lr', type=float, default=config.LEARNING_RATE, help='Learning rate')
    parser.add_argument('--train-fraction', type=float, default=config.TRAIN_FRACTION,
                        help='Fraction of rows sampled into the train partition')
    parser.add_argument('--seed', type=int, default=config.RANDOM_SEED, help='Train/test split seed')
    parser.add_argument('--no-scale', action='store_true', help='Skip feature standardization')
    parser.add_argument('--history-out', default=None, help='Write per-epoch history to this CSV')
    parser.add_argument('--no-progress', action='store_true', help='Hide progress bars')

    args = parser.parse_args()

    main(
        data_path=args.data,
        target_col=args.target_col,
        exclude=args.exclude,
        epochs=args.epochs,
        batch_size=args.batch_size,
        learning_rate=args.lr,
        train_fraction=args.train_fraction,
        seed=args.seed,
        scale=not args.no_scale,
        history_out=args.history_out,
        progress=not args.no_progress,
    )
