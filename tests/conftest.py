"""Pin in-memory backends before the app module is imported."""

import os

os.environ["STORAGE_BACKEND"] = "memory"
os.environ["PUSH_GATEWAY"] = "memory"
os.environ["FANOUT_MAX_WORKERS"] = "2"
os.environ.pop("DATABASE_URL", None)
