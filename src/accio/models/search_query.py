"""
Search query data model for Accio.

A query names the directory to walk, the filename to look for, and the
traversal strategy to use.
"""

import os
from typing import Dict, Optional, Any
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


class SearchQuery(BaseModel):
    """
    Represents a single filename search.

    The target is compared literally (ASCII case-insensitive) against file
    base names. It may not contain path separators; wildcard characters are
    treated as ordinary characters.

    Attributes:
        root: Directory to start the walk from
        target: Filename to look for
        parallel: Walk subdirectories concurrently on a thread pool
        max_workers: Worker thread count for parallel mode (None for default)
    """

    root: str = Field(..., min_length=1, description="Directory to start the walk from")
    target: str = Field(..., min_length=1, description="Filename to look for")
    parallel: bool = Field(False, description="Walk subdirectories concurrently")
    max_workers: Optional[int] = Field(None, gt=0, description="Worker threads for parallel mode")

    model_config = {"frozen": True}

    @field_validator('root')
    @classmethod
    def validate_root(cls, v: str) -> str:
        """Expand the user directory but keep relative roots relative."""
        if not v.strip():
            raise ValueError("Search root cannot be empty")
        if v.startswith('~'):
            return str(Path(v).expanduser())
        return v

    @field_validator('target')
    @classmethod
    def validate_target(cls, v: str) -> str:
        """Reject targets that cannot be a single filename."""
        separators = {os.sep, '/'}
        if os.altsep:
            separators.add(os.altsep)
        if any(sep in v for sep in separators):
            raise ValueError(f"Target must be a bare filename, got: {v!r}")
        if '\x00' in v:
            raise ValueError("Target cannot contain NUL characters")
        if v in ('.', '..'):
            raise ValueError(f"Target must name a file, got: {v!r}")
        return v

    @property
    def mode(self) -> str:
        """Human-readable traversal strategy name."""
        return "parallel" if self.parallel else "sequential"

    def get_root_path(self) -> Path:
        return Path(self.root)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the search query to a dictionary representation."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchQuery':
        """Create a SearchQuery instance from a dictionary."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        parts = [f"Target: '{self.target}'"]
        parts.append(f"Root: {self.root}")
        parts.append(f"Mode: {self.mode}")
        if self.parallel and self.max_workers:
            parts.append(f"Workers: {self.max_workers}")
        return " | ".join(parts)
