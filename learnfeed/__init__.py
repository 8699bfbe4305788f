"""Content ingestion and quiz synthesis pipeline for a learning feed."""

__version__ = "1.0.0"
