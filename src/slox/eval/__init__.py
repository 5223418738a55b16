"""Evaluator helper modules for the slox interpreter."""

__all__ = [
    "expr",
    "fn",
    "helpers",
]
