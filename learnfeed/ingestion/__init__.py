"""Book ingestion: parsing, segmentation and post chunking."""

from learnfeed.ingestion.chunker import PostChunker, truncate_to_max_chars
from learnfeed.ingestion.normalizer import normalize_markup
from learnfeed.ingestion.parser import BookParser
from learnfeed.ingestion.segmenter import split_sentences

__all__ = [
    "BookParser",
    "PostChunker",
    "normalize_markup",
    "split_sentences",
    "truncate_to_max_chars",
]
