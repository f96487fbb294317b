"""Publish a workflow build artifact to an npm-style package registry from GitHub Actions."""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
