"""
Search tools for Accio.

This package contains the filename matcher, the thread-safe result and
visit aggregates, and the filesystem walker with its sequential and
parallel strategies.
"""

from .matcher import ResultCollector, VisitCounter, matches
from .fs_walker import FSWalker, search_files

__all__ = ['FSWalker', 'ResultCollector', 'VisitCounter', 'matches', 'search_files']
