"""Shared utilities for arroyo."""

from arroyo.utils.logger import get_logger

__all__ = ["get_logger"]
