"""Utility helpers."""

from .logger import setup_logging, BoardDisplay

__all__ = ["setup_logging", "BoardDisplay"]
