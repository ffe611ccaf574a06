"""
Core utilities for novel recognition.
"""

from core.utils.similarity import NGramCorpus, SearchResult
from core.utils.title_utils import matches_keyword, find_matching_keyword, guess_keyword

__all__ = [
    'NGramCorpus',
    'SearchResult',
    'matches_keyword',
    'find_matching_keyword',
    'guess_keyword',
]
