"""Fixtures for scenarios against a real resim binary.

These tests reset and mutate the user's resim ledger. They run only when
resim is on PATH and RESIM_HARNESS_SCENARIO_DIR points at a blueprint
checkout containing a manifests/ directory.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import pytest

from resim_harness import LedgerLock, ProcessRunner
from resim_harness.config import HarnessConfig, load_config

SCENARIO_DIR = os.environ.get("RESIM_HARNESS_SCENARIO_DIR", "")

# Resolved at collection, before per-test env isolation, so scenarios share
# the lock the CLI uses for the same ledger.
SCENARIO_LOCK_FILE = load_config().lock_file


@pytest.fixture(scope="module")
def blueprint_dir() -> Path:
    """Blueprint checkout the scenarios publish and run manifests from."""
    if shutil.which("resim") is None:
        pytest.skip("resim not found on PATH")
    path = Path(SCENARIO_DIR) if SCENARIO_DIR else None
    if path is None or not (path / "manifests").is_dir():
        pytest.skip("Set RESIM_HARNESS_SCENARIO_DIR to a blueprint with manifests/")
    return path


@pytest.fixture
def resim(blueprint_dir: Path):
    """Runner and config rooted at the blueprint, holding the real ledger lock."""
    with LedgerLock(SCENARIO_LOCK_FILE):
        yield ProcessRunner(cwd=blueprint_dir), HarnessConfig()
