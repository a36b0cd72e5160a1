"""Frame hashing, simulated OCR engines, text heuristics, capture polling and performance metrics."""

__version__ = "1.0.0"