"""
Data models for Accio.

This module contains all the core data structures used throughout the system.
"""

from .search_query import SearchQuery
from .search_results import SearchResults
from .config import FinderConfig

__all__ = ['SearchQuery', 'SearchResults', 'FinderConfig']
