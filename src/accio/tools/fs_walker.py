"""
Filesystem walker for Accio.

This module walks a directory tree and collects every file whose name equals
the search target, ignoring ASCII case. Two strategies are provided:

- sequential: a single-threaded depth-first pre-order walk whose result
  order is fully deterministic (files of a directory first, then the
  contents of each subdirectory in listing order)
- parallel: every subdirectory is visited as its own task on a thread pool,
  all tasks sharing one result sink; result order follows scheduling

Directories that cannot be listed contribute nothing and never abort the
walk. They are logged at DEBUG level and kept as diagnostics.
"""

import os
import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union
from concurrent.futures import ThreadPoolExecutor, FIRST_COMPLETED, wait
import logging

from ..errors import InvalidRootError
from ..models.config import FinderConfig
from ..models.search_query import SearchQuery
from ..models.search_results import SearchResults
from .matcher import ResultCollector, VisitCounter, matches


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FSWalker:
    """
    Filesystem walker that searches a directory tree for a filename.

    A walker keeps statistics and diagnostics for the most recent search, so
    one instance should run one search at a time. Each search starts from a
    clean slate.
    """

    def __init__(self, config: Optional[FinderConfig] = None):
        """
        Initialize the filesystem walker.

        Args:
            config: Configuration object; defaults are used when omitted
        """
        self.config = config or FinderConfig()
        self._lock = threading.Lock()
        self._errors: List[str] = []
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'files_scanned': 0,
            'files_matched': 0,
            'directories_traversed': 0,
            'errors': 0
        }

    def search(self, query: SearchQuery,
               progress: Optional[Callable[[int], None]] = None) -> SearchResults:
        """
        Run a complete search described by a query.

        Args:
            query: Root, target and strategy to use
            progress: Optional callback receiving directory visit increments

        Returns:
            SearchResults with the matched paths and walk statistics

        Raises:
            InvalidRootError: If the root does not exist or is not a directory
        """
        root_path = query.get_root_path()
        if not root_path.is_dir():
            raise InvalidRootError(query.root)

        counter = VisitCounter(progress)
        logger.info(f"Starting {query.mode} search for '{query.target}' in {query.root}")

        start_time = time.perf_counter()
        if query.parallel:
            paths = self.search_parallel(query.root, query.target, counter, query.max_workers)
        else:
            paths = self.search_sequential(query.root, query.target, counter)
        execution_time = time.perf_counter() - start_time

        results = SearchResults(
            query=query,
            matches=paths,
            directories_visited=counter.value,
            execution_time=execution_time,
            errors=self.get_errors()
        )
        logger.info(f"Search finished: {results}")
        return results

    def search_sequential(self, root: PathLike, target: str,
                          counter: Optional[VisitCounter] = None) -> List[str]:
        """
        Walk the tree depth-first on the calling thread.

        An explicit stack replaces recursion so deep trees are not bounded by
        the interpreter recursion limit. Subdirectories are pushed in reverse
        listing order, which reproduces recursive pre-order exactly.

        Args:
            root: Directory to start from
            target: Filename to look for
            counter: Optional visit counter to increment per directory

        Returns:
            Matched paths in deterministic pre-order
        """
        self.reset_stats()
        counter = counter or VisitCounter()
        collector = ResultCollector()

        stack: List[str] = [os.fspath(root)]
        while stack:
            current = stack.pop()
            subdirs = self._visit_directory(current, target, collector, counter)
            stack.extend(reversed(subdirs))

        return collector.to_list()

    def search_parallel(self, root: PathLike, target: str,
                        counter: Optional[VisitCounter] = None,
                        max_workers: Optional[int] = None) -> List[str]:
        """
        Walk the tree with one thread-pool task per directory.

        Worker tasks never wait on each other: each one lists its directory,
        records matches in the shared sink, and hands its subdirectories back.
        The calling thread schedules those as new tasks and only returns once
        no task is pending.

        Args:
            root: Directory to start from
            target: Filename to look for
            counter: Optional visit counter to increment per directory
            max_workers: Thread count; falls back to the configured value

        Returns:
            Matched paths in scheduling order
        """
        self.reset_stats()
        counter = counter or VisitCounter()
        collector = ResultCollector()
        workers = max_workers or self.config.search.get_effective_workers()

        logger.debug(f"Parallel walk using {workers} worker threads")

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="accio-walker") as executor:
            pending = {
                executor.submit(self._visit_directory, os.fspath(root), target, collector, counter)
            }
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    for subdir in future.result():
                        pending.add(
                            executor.submit(self._visit_directory, subdir, target, collector, counter)
                        )

        return collector.to_list()

    def _visit_directory(self, path: str, target: str,
                         collector: ResultCollector, counter: VisitCounter) -> List[str]:
        """
        Process one directory: match its files and return its subdirectories.

        Args:
            path: Directory to list
            target: Filename to look for
            collector: Sink for matched paths
            counter: Visit counter to increment

        Returns:
            Full paths of the subdirectories, in listing order
        """
        counter.increment()
        files, subdirs = self._scan_directory(path)

        found = [entry.path for entry in files if matches(entry.name, target)]
        collector.extend(found)

        self._bump_stats(directories_traversed=1, files_scanned=len(files), files_matched=len(found))
        return [entry.path for entry in subdirs]

    def _scan_directory(self, path: str) -> Tuple[List[os.DirEntry], List[os.DirEntry]]:
        """
        List a directory once and split its entries into files and subdirectories.

        Entries read before a listing error are kept; a directory that cannot
        be opened yields nothing.

        Args:
            path: Directory to list

        Returns:
            Tuple of (file entries, directory entries)
        """
        entries: List[os.DirEntry] = []
        try:
            with os.scandir(path) as iterator:
                for entry in iterator:
                    entries.append(entry)
        except OSError as e:
            self._record_error(path, e)

        files: List[os.DirEntry] = []
        subdirs: List[os.DirEntry] = []
        for entry in entries:
            if self._is_directory(entry):
                subdirs.append(entry)
            else:
                files.append(entry)
        return files, subdirs

    @staticmethod
    def _is_directory(entry: os.DirEntry) -> bool:
        """Check if an entry is a directory, following symlinks."""
        try:
            return entry.is_dir()
        except OSError:
            return False

    def _record_error(self, path: str, error: OSError) -> None:
        logger.debug(f"Cannot list directory {path}: {error}")
        message = f"{path}: {error.strerror or error}"
        with self._lock:
            self._errors.append(message)
            self._stats['errors'] += 1

    def _bump_stats(self, **increments: int) -> None:
        with self._lock:
            for key, value in increments.items():
                self._stats[key] += value

    def get_errors(self) -> List[str]:
        """
        Get the directories that could not be listed during the last search.

        Returns:
            List of "path: reason" messages
        """
        with self._lock:
            return list(self._errors)

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about the last search.

        Returns:
            Dictionary containing operation statistics
        """
        with self._lock:
            return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters and diagnostics."""
        with self._lock:
            self._stats = self._empty_stats()
            self._errors = []


def search_files(root: PathLike, target: str, parallel: bool = False,
                 max_workers: Optional[int] = None,
                 progress: Optional[Callable[[int], None]] = None) -> List[str]:
    """
    Convenience function to search a tree for a filename.

    Args:
        root: Directory to start from
        target: Filename to look for (ASCII case-insensitive)
        parallel: Use the parallel walker
        max_workers: Thread count for parallel mode
        progress: Optional callback receiving directory visit increments

    Returns:
        List of matched file paths

    Raises:
        InvalidRootError: If the root does not exist or is not a directory
    """
    query = SearchQuery(
        root=os.fspath(root),
        target=target,
        parallel=parallel,
        max_workers=max_workers
    )
    return FSWalker().search(query, progress=progress).matches
