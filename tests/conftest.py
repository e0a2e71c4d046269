"""Shared test fixtures for resim-harness tests.

FakeResim stands in for the resim binary: it answers each subcommand
with output shaped like the real tool and records every invocation.
Patch it over subprocess.run with the ``fake_resim`` fixture.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import patch

import pytest

# =============================================================================
# Sample tool output
# =============================================================================

SYSTEM_PACKAGE = "package_sim1pkgxxxxxxxxxresrcexxxxxxxxx000538436477xxxxxxxxxaj0zg9"
PAYER_ACCOUNT = "account_sim1c956qr3kxlgypxwst89j9yf24tjc7zxd4up38x37zr6q4jxdx9rhma"


def new_account_output(n: int) -> str:
    """Output of ``resim new-account`` for the n-th account."""
    return (
        "A new account has been created!\n"
        f"Account component address: account_sim1test{n:04d}\n"
        f"Public key: 03pub{n:04d}\n"
        f"Private key: 0priv{n:04d}\n"
        f"Owner badge: resource_sim1ownerbadge{n:04d}:#1#\n"
        "Created new account\n"
    )


def publish_output(package: str) -> str:
    return (
        "Transaction Status: COMMITTED SUCCESS\n"
        "Transaction Fee: 4.83 XRD used for execution\n"
        f"Success! New Package: {package}\n"
    )


def show_ledger_output(accounts: list[str], packages: list[str]) -> str:
    lines = ["Packages:"]
    lines += [f"├─ {p}" for p in packages]
    lines.append("Global Entities:")
    lines += [f"├─ {a}" for a in accounts]
    lines.append("Current Epoch: 1")
    return "\n".join(lines) + "\n"


def show_configs_output(account: str) -> str:
    return (
        "Default Account:\n"
        f"- Account Address: {account}\n"
        "- Private Key: 0privdefault\n"
        "- Owner Badge: resource_sim1ownerbadge:#1#\n"
        "Current Epoch: 1\n"
    )


def run_output(component: str | None = None, resources: tuple[str, ...] = ()) -> str:
    lines = ["Transaction Status: COMMITTED SUCCESS", "New Entities:"]
    if component:
        lines.append(f"└─ Component: {component}")
    lines += [f"└─ Resource: {r}" for r in resources]
    return "\n".join(lines) + "\n"


# =============================================================================
# FakeResim - scripted resim binary
# =============================================================================


@dataclass
class FakeResim:
    """Scripted replacement for the resim binary."""

    # Ledger state
    accounts: list[str] = field(default_factory=list)
    packages: list[str] = field(default_factory=lambda: [SYSTEM_PACKAGE])
    default_account: str = PAYER_ACCOUNT
    next_package: str = "package_sim1published"

    # Response configuration
    run_outputs: dict[str, str] = field(default_factory=dict)
    overrides: dict[str, str] = field(default_factory=dict)  # subcommand -> stdout
    failures: dict[str, int] = field(default_factory=dict)  # subcommand -> exit code

    # Request tracking
    calls: list[list[str]] = field(default_factory=list)
    envs: list[dict[str, str] | None] = field(default_factory=list)

    def subcommands(self) -> list[str]:
        """Subcommands in invocation order."""
        return [c[1] for c in self.calls]

    def __call__(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append(list(args))
        self.envs.append(kwargs.get("env"))
        sub = args[1]

        if sub in self.failures:
            return subprocess.CompletedProcess(
                args, self.failures[sub], stdout=b"partial output\n", stderr=b"error: boom\n"
            )
        if sub in self.overrides:
            stdout = self.overrides[sub]
        else:
            stdout = self._respond(sub, args[2:])
        return subprocess.CompletedProcess(args, 0, stdout=stdout.encode("utf-8"), stderr=b"")

    def _respond(self, sub: str, rest: list[str]) -> str:
        if sub == "reset":
            self.accounts.clear()
            self.packages = [SYSTEM_PACKAGE]
            return "Data directory cleared.\n"
        if sub == "new-account":
            output = new_account_output(len(self.accounts) + 1)
            self.accounts.append(f"account_sim1test{len(self.accounts) + 1:04d}")
            return output
        if sub == "publish":
            self.packages.append(self.next_package)
            return publish_output(self.next_package)
        if sub == "show-ledger":
            return show_ledger_output(self.accounts, self.packages)
        if sub == "show-configs":
            return show_configs_output(self.default_account)
        if sub == "run":
            return self.run_outputs.get(rest[0], run_output())
        raise AssertionError(f"unexpected resim subcommand: {sub}")


@pytest.fixture
def fake_resim() -> Generator[FakeResim, None, None]:
    """Patch subprocess.run with a FakeResim."""
    fake = FakeResim()
    with patch("subprocess.run", side_effect=fake):
        yield fake


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the user's config, env and ledger lock."""
    for name in (
        "RESIM_HARNESS_BIN",
        "RESIM_HARNESS_PACKAGE_DIR",
        "RESIM_HARNESS_ACTOR_COUNT",
        "RESIM_HARNESS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RESIM_HARNESS_LOCK_FILE", str(tmp_path / "ledger.lock"))
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    # CLI tests bind a handler to CliRunner streams
    logging.getLogger().handlers.clear()
