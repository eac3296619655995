import logging
import os
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple, Union

from .comments import display_label, tooltip
from .index import WorkspaceIndex
from .models import Comment


logger = logging.getLogger(__name__)


def relative_label(file_path: str, roots: Sequence[str]) -> str:
    """Path relative to the deepest root containing it, else the path itself."""
    best = None
    for root in roots:
        root = os.path.abspath(root)
        try:
            if os.path.commonpath([root, file_path]) != root:
                continue
        except ValueError:
            continue
        if best is None or len(root) > len(best):
            best = root
    if best is None:
        return file_path
    return os.path.relpath(file_path, best).replace(os.sep, "/")


@dataclass(frozen=True)
class FileNode:
    file_path: str
    comment_count: int

    @property
    def description(self) -> str:
        suffix = "" if self.comment_count == 1 else "s"
        return f"{self.comment_count} comment{suffix}"

    def label(self, roots: Sequence[str] = ()) -> str:
        return relative_label(self.file_path, roots)


@dataclass(frozen=True)
class CommentNode:
    comment: Comment

    @property
    def label(self) -> str:
        return display_label(self.comment.text)

    @property
    def selection(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        return self.comment.selection

    def tooltip(self, roots: Sequence[str] = ()) -> str:
        return tooltip(self.comment, relative_label(self.comment.file_path, roots))


TreeNode = Union[FileNode, CommentNode]


class TreeModel:
    """Two-level view (files, then their comments) over a WorkspaceIndex."""

    def __init__(self, index: WorkspaceIndex):
        self.index = index
        self._callbacks: List[Callable[[], None]] = []
        index.add_listener(self._on_index_refreshed)

    def roots(self) -> List[FileNode]:
        return [FileNode(r.file_path, r.comment_count) for r in self.index.get_index()]

    def children_of(self, node: TreeNode) -> List[CommentNode]:
        if not isinstance(node, FileNode):
            return []
        record = self.index.get_record(node.file_path)
        if record is None:
            return []
        return [CommentNode(c) for c in record.comments]

    def on_changed(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call callback after every committed refresh. Returns an unsubscribe function."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def _on_index_refreshed(self) -> None:
        for callback in list(self._callbacks):
            try:
                callback()
            except Exception:
                logger.exception("Tree change callback %r failed", callback)

    def close(self) -> None:
        self.index.remove_listener(self._on_index_refreshed)
        self._callbacks.clear()
