from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class CommentKind(str, Enum):
    LINE = "line"
    HASH = "hash"
    BLOCK = "block"
    HTML = "html"


@dataclass(frozen=True)
class Comment:
    file_path: str
    text: str  # verbatim match, delimiters included
    line_number: int  # 1-based
    column: int  # 0-based, in characters
    kind: CommentKind = CommentKind.LINE

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def selection(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Zero-based ((line, col), (line, col)) range covering the comment start line."""
        line = self.line_number - 1
        return (line, self.column), (line, self.column + self.length)


@dataclass(frozen=True)
class FileRecord:
    file_path: str
    # Discovery order: line passes, then block comments, then HTML comments
    comments: Tuple[Comment, ...] = ()

    @property
    def comment_count(self) -> int:
        return len(self.comments)


@dataclass(frozen=True)
class IndexStats:
    total_files: int = 0
    total_comments: int = 0
