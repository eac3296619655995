import locale
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import ExplorerConfig
from .files import MAX_FILES, ScanError, iter_workspace_files, scan_file
from .models import FileRecord, IndexStats


logger = logging.getLogger(__name__)


Listener = Callable[[], None]


class _Snapshot:
    """Immutable view of one completed refresh."""

    __slots__ = ("records", "by_path", "stats")

    def __init__(self, records: Tuple[FileRecord, ...]):
        self.records = records
        self.by_path: Dict[str, FileRecord] = {r.file_path: r for r in records}
        self.stats = IndexStats(
            total_files=len(records),
            total_comments=sum(r.comment_count for r in records),
        )


def sort_records(records: Iterable[FileRecord]) -> List[FileRecord]:
    """Sort by path with the process collation (LC_COLLATE); code point order under the C locale."""
    return sorted(records, key=lambda r: locale.strxfrm(r.file_path))


class WorkspaceIndex:
    """Per-file comment records for a set of workspace roots.

    Every refresh re-scans from scratch and swaps in a new snapshot with a
    single assignment, so readers see either the previous or the new index.
    Each refresh takes a generation number when it starts; a refresh that
    finishes after a newer one has started throws its result away.
    """

    def __init__(self, max_files: Optional[int] = MAX_FILES, workers: int = 4):
        self.max_files = max_files
        self.workers = max(1, workers)
        self._snapshot = _Snapshot(())
        self._lock = threading.Lock()
        self._generation = 0
        self._committed_generation = 0
        self._listeners: List[Listener] = []

    @property
    def generation(self) -> int:
        return self._committed_generation

    def get_index(self) -> Tuple[FileRecord, ...]:
        return self._snapshot.records

    def get_record(self, file_path: str) -> Optional[FileRecord]:
        return self._snapshot.by_path.get(file_path)

    def get_stats(self) -> IndexStats:
        return self._snapshot.stats

    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _enumerate(self, roots: Sequence[str], config: ExplorerConfig) -> List[str]:
        seen = set()
        paths: List[str] = []
        for root in roots:
            found = 0
            for path in iter_workspace_files(root, config, self.max_files):
                found += 1
                if path in seen:
                    continue
                seen.add(path)
                paths.append(path)
            logger.info("Found %d candidate files under %s", found, os.path.abspath(root))
        return paths

    def _scan_one(self, path: str) -> Optional[FileRecord]:
        try:
            record = scan_file(path)
        except ScanError as e:
            logger.warning("Skipping %s: %s", e.path, e.reason)
            return None
        if not record.comments:
            return None
        return record

    def _scan_all(self, paths: List[str]) -> List[FileRecord]:
        if self.workers == 1 or len(paths) < 2:
            results = [self._scan_one(p) for p in paths]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                results = list(pool.map(self._scan_one, paths))
        return [r for r in results if r is not None]

    def refresh(self, roots: Sequence[str], config: Optional[ExplorerConfig] = None) -> bool:
        """Rebuild the index for roots under config.

        Returns True when the result was committed, False when a newer refresh
        started meanwhile and superseded it.
        """
        config = config or ExplorerConfig()
        with self._lock:
            self._generation += 1
            generation = self._generation

        if not roots:
            logger.info("No workspace roots configured, index is empty")
            records: List[FileRecord] = []
        else:
            paths = self._enumerate(roots, config)
            records = sort_records(self._scan_all(paths))

        snapshot = _Snapshot(tuple(records))
        with self._lock:
            if generation < self._generation:
                logger.info("Refresh %d superseded by refresh %d, discarding result", generation, self._generation)
                return False
            self._snapshot = snapshot
            self._committed_generation = generation

        logger.info(
            "Indexed %d comments in %d files (refresh %d)",
            snapshot.stats.total_comments,
            snapshot.stats.total_files,
            generation,
        )
        self._notify()
        return True

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Index listener %r failed", listener)
