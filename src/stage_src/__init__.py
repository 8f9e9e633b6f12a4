"""
Stage source subdirectories at the package root before publishing, so that
imports resolve without a nested ``src/`` prefix.
"""

from __future__ import annotations

__version__ = "0.1.0"
