# -------------------------
# Paths
# -------------------------
DATA_PATH = "Data/videos.csv"
TARGET_COL = "view_count"

# -------------------------
# Data split
# -------------------------
TRAIN_FRACTION = 0.8
RANDOM_SEED = 42  # governs the train/test split only

# -------------------------
# Model
# -------------------------
HIDDEN_DIMS = (128, 64)
DROPOUT_RATE = 0.2

# -------------------------
# Training hyperparameters
# -------------------------
BATCH_SIZE = 32
EPOCHS = 20
LEARNING_RATE = 1e-3
