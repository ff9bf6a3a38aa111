"""Test helper utilities for Recruit Notify tests."""

from .fakes import FakeSMTP, FakeSMTPFactory, ImmediateExecutor, ManualExecutor
from .fixture_notifications import FIXTURES_DIR, load_fixture_notifications, seed_store

__all__ = [
    "FakeSMTP",
    "FakeSMTPFactory",
    "ImmediateExecutor",
    "ManualExecutor",
    "FIXTURES_DIR",
    "load_fixture_notifications",
    "seed_store",
]
