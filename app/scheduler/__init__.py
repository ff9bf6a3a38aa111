"""Scheduling module for periodic refresh of live notification queries."""

from .service import REFRESH_JOB_ID, StoreRefreshScheduler

__all__ = [
    "StoreRefreshScheduler",
    "REFRESH_JOB_ID",
]
