"""Filesystem locations used by resim-harness."""

from pathlib import Path

# Base directory for harness data
HARNESS_DIR = Path.home() / ".resim-harness"

# Scenario lock guarding the resim ledger
LOCK_FILE = HARNESS_DIR / "ledger.lock"
