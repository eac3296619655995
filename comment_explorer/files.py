import logging
import os
import time
from dataclasses import dataclass
from typing import Iterator, List, Optional

from pathspec import GitIgnoreSpec

from .comments import match_comments
from .config import ExplorerConfig
from .models import Comment, FileRecord
from .positions import resolve_in_lines, split_lines


logger = logging.getLogger(__name__)


MAX_FILES = 10000


class ScanError(Exception):
    """A single file could not be read or decoded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def build_exclude_spec(config: ExplorerConfig) -> GitIgnoreSpec:
    return GitIgnoreSpec.from_lines(config.effective_excludes)


def _relative(path: str, root: str) -> str:
    return os.path.relpath(path, root).replace(os.sep, "/")


def _is_included(filename: str, extensions: List[str]) -> bool:
    if not extensions:
        return True
    return any(filename.endswith("." + ext) for ext in extensions)


def iter_workspace_files(root: str, config: ExplorerConfig, max_files: Optional[int] = MAX_FILES) -> Iterator[str]:
    """Yield absolute paths under root that pass the include/exclude rules.

    Excluded directories are pruned; traversal order is sorted so truncation at
    max_files is deterministic. An unreadable or missing root yields nothing.
    """
    root = os.path.abspath(root)
    if not os.path.isdir(root):
        logger.warning("Workspace root %s is not an accessible directory", root)
        return

    spec = build_exclude_spec(config)
    extensions = config.normalized_extensions
    count = 0

    def on_error(err: OSError) -> None:
        logger.warning("Cannot list %s: %s", getattr(err, "filename", root), err)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        kept = []
        for d in sorted(dirnames):
            if spec.match_file(_relative(os.path.join(dirpath, d), root) + "/"):
                logger.debug("Pruning excluded directory %s", os.path.join(dirpath, d))
                continue
            kept.append(d)
        dirnames[:] = kept

        for filename in sorted(filenames):
            if not _is_included(filename, extensions):
                continue
            path = os.path.join(dirpath, filename)
            if spec.match_file(_relative(path, root)):
                continue
            if max_files is not None and count >= max_files:
                logger.info("File limit of %d reached under %s, remaining files are not scanned", max_files, root)
                return
            count += 1
            yield path


def read_text(path: str) -> str:
    try:
        # newline="" keeps '\r' so offsets match the bytes on disk
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ScanError(path, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
    except OSError as e:
        raise ScanError(path, e.strerror or str(e)) from e


def extract_comments_from_text(path: str, text: str) -> List[Comment]:
    lines = split_lines(text)
    comments: List[Comment] = []
    for m in match_comments(text, lines):
        if m.needs_position:
            line_number, column = resolve_in_lines(lines, m.offset)
        else:
            line_number, column = m.line_number, m.column
        comments.append(Comment(file_path=path, text=m.text, line_number=line_number, column=column, kind=m.kind))
    return comments


def scan_file(path: str) -> FileRecord:
    """Read path and return its comments; raises ScanError when it can't be read."""
    text = read_text(path)
    return FileRecord(file_path=path, comments=tuple(extract_comments_from_text(path, text)))


@dataclass(frozen=True)
class ExclusionReport:
    total_files: int
    elapsed_ms: int
    node_modules: int
    dist: int
    build: int
    git: int

    @property
    def ok(self) -> bool:
        return not (self.node_modules or self.dist or self.build or self.git)

    def format(self) -> str:
        verdict = "Exclusions working correctly!" if self.ok else "Some exclusions not working"
        return "\n".join(
            [
                "Test Results:",
                f"- Total files found: {self.total_files}",
                f"- Time: {self.elapsed_ms}ms",
                f"- node_modules files: {self.node_modules}",
                f"- dist files: {self.dist}",
                f"- build files: {self.build}",
                f"- .git files: {self.git}",
                "",
                verdict,
            ]
        )


def check_exclusions(root: str, config: ExplorerConfig, max_files: Optional[int] = MAX_FILES) -> ExclusionReport:
    """Enumerate root and count files that sit in directories normally excluded."""
    root = os.path.abspath(root)
    started = time.monotonic()
    files = list(iter_workspace_files(root, config, max_files))
    elapsed_ms = int((time.monotonic() - started) * 1000)

    def count(dirname: str) -> int:
        return sum(1 for p in files if dirname in _relative(p, root).split("/")[:-1])

    return ExclusionReport(
        total_files=len(files),
        elapsed_ms=elapsed_ms,
        node_modules=count("node_modules"),
        dist=count("dist"),
        build=count("build"),
        git=count(".git"),
    )
