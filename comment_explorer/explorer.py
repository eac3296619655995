import logging
import os
from typing import Iterable, List, Optional

from .config import ExplorerConfig
from .index import WorkspaceIndex
from .models import IndexStats
from .tree import TreeModel


logger = logging.getLogger(__name__)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'}"


class CommentExplorer:
    """Ties workspace roots and configuration to an index and its tree.

    Refreshes happen on demand, when the configuration changes and when a
    root is added or removed.
    """

    def __init__(
        self,
        roots: Iterable[str] = (),
        config: Optional[ExplorerConfig] = None,
        index: Optional[WorkspaceIndex] = None,
    ):
        self._roots: List[str] = []
        for r in roots:
            self._add(r)
        self.config = config or ExplorerConfig()
        self.index = index or WorkspaceIndex()
        self.tree = TreeModel(self.index)

    @property
    def roots(self) -> List[str]:
        return list(self._roots)

    def _add(self, root: str) -> bool:
        root = os.path.abspath(root)
        if root in self._roots:
            return False
        self._roots.append(root)
        return True

    def refresh(self) -> bool:
        logger.info("Refreshing comments for %d workspace root(s)", len(self._roots))
        return self.index.refresh(self.roots, self.config)

    def update_config(self, config: ExplorerConfig) -> bool:
        """Install a new configuration; refreshes only when it differs."""
        if config == self.config:
            logger.debug("Configuration unchanged, not refreshing")
            return False
        self.config = config
        return self.refresh()

    def add_root(self, root: str) -> bool:
        if not self._add(root):
            return False
        return self.refresh()

    def remove_root(self, root: str) -> bool:
        root = os.path.abspath(root)
        if root not in self._roots:
            return False
        self._roots.remove(root)
        return self.refresh()

    def set_roots(self, roots: Iterable[str]) -> bool:
        self._roots = []
        for r in roots:
            self._add(r)
        return self.refresh()

    def stats(self) -> IndexStats:
        return self.index.get_stats()

    def summary(self) -> str:
        stats = self.stats()
        if stats.total_comments > 0:
            return f"Found {_plural(stats.total_comments, 'comment')} in {_plural(stats.total_files, 'file')}"
        if self._roots:
            return "No comments found in the current workspace"
        return "No workspace folder opened"
