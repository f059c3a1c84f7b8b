"""
CLI commands for cardsort.

Provides the command-line interface for running the similarity and
clustering analyses on exported study results.
"""

__all__ = ["analyze", "config", "main"]
