"""Command-line interface for LakeHub."""

from .main import main

__all__ = ["main"]
