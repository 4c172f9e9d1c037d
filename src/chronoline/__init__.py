"""chronoline — timeline event extraction from tagged markdown notes."""

__version__ = "0.1.0"
