"""Transcript search index"""

from app.search.base import SearchIndex, SearchIndexError, TranscriptNotFound, tokenize
from app.search.tantivy_index import TantivySearchIndex

__all__ = [
    "SearchIndex",
    "SearchIndexError",
    "TranscriptNotFound",
    "tokenize",
    "TantivySearchIndex",
]
