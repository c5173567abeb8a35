"""Root conftest — shared test configuration."""

import os

# Keep tests away from a real data directory and real identities
os.environ.setdefault("DATA_DIR", "test-data")
os.environ.setdefault("LOG_FORMAT", "text")
