"""Artifact files and durable corpus storage."""

from learnfeed.storage.artifacts import ArtifactStore
from learnfeed.storage.database import get_connection, initialize_database
from learnfeed.storage.repository import CorpusRepository

__all__ = ["ArtifactStore", "CorpusRepository", "get_connection", "initialize_database"]
