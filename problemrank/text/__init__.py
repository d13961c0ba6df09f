"""Text normalization and keyword extraction."""
