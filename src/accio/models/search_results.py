"""
Search results data model for Accio.

This module defines the outcome of one filename search: the matched paths,
how many directories were visited, how long the walk took, and any
directories that could not be listed along the way.
"""

from typing import Dict, List, Any, Set
from datetime import datetime
from pathlib import Path
from pydantic import BaseModel, Field

from .search_query import SearchQuery


class SearchResults(BaseModel):
    """
    Complete results from a search operation.

    In sequential mode ``matches`` follows depth-first pre-order (files of a
    directory before the contents of its subdirectories). In parallel mode
    the order depends on thread scheduling; compare with ``match_set()``.

    Attributes:
        query: The query that produced these results
        matches: Full paths of matching files
        directories_visited: Number of directories processed, root included
        execution_time: Wall-clock time of the walk in seconds
        timestamp: When the search was executed
        errors: Directories that could not be listed, with the reason
    """

    query: SearchQuery = Field(..., description="The original search query")
    matches: List[str] = Field(default_factory=list, description="Matched file paths")
    directories_visited: int = Field(0, ge=0, description="Directories processed")
    execution_time: float = Field(0.0, ge=0.0, description="Time taken to execute the search")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the search was executed")
    errors: List[str] = Field(default_factory=list, description="Absorbed enumeration failures")

    def get_match_count(self) -> int:
        """Get the total number of matches."""
        return len(self.matches)

    def has_matches(self) -> bool:
        return bool(self.matches)

    def match_set(self) -> Set[str]:
        """Get the matches as an unordered set."""
        return set(self.matches)

    def get_match_paths(self) -> List[Path]:
        return [Path(match) for match in self.matches]

    def has_errors(self) -> bool:
        """Check if any directory could not be listed."""
        return len(self.errors) > 0

    def add_error(self, error: str) -> None:
        self.errors.append(error)

    def sort_by_path(self) -> None:
        """Sort matches alphabetically by path."""
        self.matches.sort()

    def to_dict(self) -> Dict[str, Any]:
        """Convert search results to dictionary representation."""
        data = self.model_dump()
        data['query'] = self.query.to_dict()
        data['match_count'] = self.get_match_count()
        data['timestamp'] = self.timestamp.isoformat()
        data['has_errors'] = self.has_errors()
        return data

    def __str__(self) -> str:
        parts = [f"Found {self.get_match_count()} matches"]
        parts.append(f"Scanned {self.directories_visited} directories")
        parts.append(f"Took {self.execution_time:.2f}s")

        if self.has_errors():
            parts.append(f"Errors: {len(self.errors)}")

        return " | ".join(parts)
