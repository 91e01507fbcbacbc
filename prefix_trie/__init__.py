"""In-memory prefix trie with enumeration and bounded fuzzy matching."""

import logging

from .trie import END, FuzzyMatch, MatchResult, PrefixTrie, TrieNode
from .stats import TrieStats
from .serialization import TrieFormatError

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
  "END",
  "FuzzyMatch",
  "MatchResult",
  "PrefixTrie",
  "TrieFormatError",
  "TrieNode",
  "TrieStats",
]
