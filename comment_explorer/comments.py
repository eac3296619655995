import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from .models import Comment, CommentKind
from .positions import split_lines


LINE_COMMENT_RE = re.compile(r"^([\s\ufeff]*)//(.*)")
HASH_COMMENT_RE = re.compile(r"^([\s\ufeff]*)#(.*)")

# Delimiters for the comment styles that may span lines. Matching is the same
# as a global non-greedy /\*[\s\S]*?\*/ (resp. <!--[\s\S]*?-->), done with
# str.find so an unterminated opener costs one scan instead of one per opener.
BLOCK_DELIMITERS = ("/*", "*/")
HTML_DELIMITERS = ("<!--", "-->")

LABEL_LIMIT = 100


@dataclass(frozen=True)
class CommentMatch:
    kind: CommentKind
    text: str
    offset: int
    # Set by the per-line passes, which know their position without resolving
    line_number: Optional[int] = None
    column: Optional[int] = None

    @property
    def needs_position(self) -> bool:
        return self.line_number is None


def _match_line_comments(lines: Sequence[str]) -> Iterator[CommentMatch]:
    line_start = 0
    for index, line in enumerate(lines):
        for kind, pattern, marker in (
            (CommentKind.LINE, LINE_COMMENT_RE, "//"),
            (CommentKind.HASH, HASH_COMMENT_RE, "#"),
        ):
            m = pattern.match(line)
            if not m:
                continue
            indent = len(m.group(1))
            rest = m.group(2)
            if rest.endswith("\r"):
                rest = rest[:-1]
            yield CommentMatch(
                kind=kind,
                text=marker + rest,
                offset=line_start + indent,
                line_number=index + 1,
                column=indent,
            )
        line_start += len(line) + 1


def _match_delimited(content: str, kind: CommentKind, opener: str, closer: str) -> Iterator[CommentMatch]:
    pos = 0
    while True:
        start = content.find(opener, pos)
        if start == -1:
            return
        close = content.find(closer, start + len(opener))
        if close == -1:
            # No closer after this opener means none after any later opener either
            return
        end = close + len(closer)
        yield CommentMatch(kind=kind, text=content[start:end], offset=start)
        pos = end


def match_comments(content: str, lines: Optional[Sequence[str]] = None) -> List[CommentMatch]:
    """Find comments in content, in pass order: line/hash, block, HTML.

    Overlapping styles are reported independently, e.g. a '#' line inside a
    block comment yields both a hash match and the block match.
    """
    if lines is None:
        lines = split_lines(content)
    matches: List[CommentMatch] = list(_match_line_comments(lines))
    matches.extend(_match_delimited(content, CommentKind.BLOCK, *BLOCK_DELIMITERS))
    matches.extend(_match_delimited(content, CommentKind.HTML, *HTML_DELIMITERS))
    return matches


def display_label(text: str, limit: int = LABEL_LIMIT) -> str:
    """Short single-line label for a comment: markers removed, stars stripped, truncated."""
    cleaned = re.sub(r"^//\s*", "", text)
    cleaned = re.sub(r"^/\*+\s*", "", cleaned)
    cleaned = re.sub(r"\s*\*+/\Z", "", cleaned)
    cleaned = re.sub(r"^<!--\s*", "", cleaned)
    cleaned = re.sub(r"\s*-->\Z", "", cleaned)
    cleaned = re.sub(r"^#\s*", "", cleaned)
    cleaned = cleaned.strip()

    if "/*" in text and "*/" in text:
        cleaned = " ".join(re.sub(r"^\s*\*\s?", "", l).strip() for l in cleaned.split("\n")).strip()

    if len(cleaned) > limit:
        return cleaned[: limit - 3] + "..."
    return cleaned or "Empty comment"


def tooltip(comment: Comment, relative_path: str) -> str:
    return (
        f"File: {relative_path}\n"
        f"Line: {comment.line_number}\n"
        f"Column: {comment.column + 1}\n"
        f"\n"
        f"{comment.text}"
    )
