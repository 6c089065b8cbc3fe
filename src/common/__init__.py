"""
Common utilities shared across the frame benchmark harness.
"""

from .config import BenchmarkMode, BenchmarkSettings, HarnessConfig

__all__ = ["BenchmarkMode", "BenchmarkSettings", "HarnessConfig"]
