"""Shared utilities package for the Remotely Save PRO client"""

from .storage import SettingsStorage
from .logging_setup import setup_logging

__all__ = [
    "SettingsStorage",
    "setup_logging",
]
