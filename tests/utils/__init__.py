"""Testing utilities for cardsort."""

from tests.utils.assertions import (
    CLIAssertions,
    DendrogramAssertions,
    MatrixAssertions,
)

__all__ = [
    "CLIAssertions",
    "DendrogramAssertions",
    "MatrixAssertions",
]
