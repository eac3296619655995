import argparse
import json
import os
from typing import List, Optional, Sequence, TextIO

from .config import ExplorerConfig
from .explorer import CommentExplorer
from .files import MAX_FILES, check_exclusions
from .index import WorkspaceIndex
from .tree import TreeModel


LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List //, #, /* */ and <!-- --> comments found under workspace roots.")
    parser.add_argument("roots", nargs="*", help="Workspace roots to scan (default: config 'roots', else current directory)")
    parser.add_argument("--config", "-c", default=".", help="Path to config file or directory (default: current directory)")
    parser.add_argument("--ext", nargs="*", default=None, help="File extensions to include (e.g., ts py html)")
    parser.add_argument("--exclude", nargs="*", default=None, help="Glob patterns to exclude (replaces the default excludes)")
    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    parser.add_argument("--check-exclusions", action="store_true", help="Report whether excluded directories leak into the scan")
    parser.add_argument("--workers", type=int, default=4, help="Number of files scanned in parallel")
    parser.add_argument("--max-files", type=int, default=MAX_FILES, help="Maximum files enumerated per root")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Set logging level (overrides --verbose).")
    return parser.parse_args(argv)


def resolve_roots(args_roots: Sequence[str], config: ExplorerConfig) -> List[str]:
    if args_roots:
        return [os.path.abspath(r) for r in args_roots]
    if config.roots:
        return list(config.roots)
    return [os.getcwd()]


def run(roots: Sequence[str], config: ExplorerConfig, workers: int = 4, max_files: Optional[int] = MAX_FILES) -> CommentExplorer:
    explorer = CommentExplorer(roots, config, WorkspaceIndex(max_files=max_files, workers=workers))
    explorer.refresh()
    return explorer


def results_as_json(tree: TreeModel) -> list:
    return [
        {
            "file_path": node.file_path,
            "comments": [
                {
                    "text": child.comment.text,
                    "line_number": child.comment.line_number,
                    "column": child.comment.column,
                    "kind": child.comment.kind.value,
                }
                for child in tree.children_of(node)
            ],
        }
        for node in tree.roots()
    ]


def print_results(explorer: CommentExplorer, as_json: bool, out: Optional[TextIO] = None) -> None:
    def emit(line: str = "") -> None:
        print(line, file=out)

    tree = explorer.tree
    if as_json:
        emit(json.dumps(results_as_json(tree), ensure_ascii=False, indent=2))
        return
    for node in tree.roots():
        emit(f"{node.label(explorer.roots)} ({node.description})")
        for child in tree.children_of(node):
            c = child.comment
            emit(f"  {c.line_number}:{c.column}  {child.label}")
    emit(explorer.summary())


def print_exclusion_reports(roots: Sequence[str], config: ExplorerConfig, max_files: Optional[int], out: Optional[TextIO] = None) -> bool:
    ok = True
    for root in roots:
        report = check_exclusions(root, config, max_files)
        print(f"{root}:", file=out)
        print(report.format(), file=out)
        ok = ok and report.ok
    return ok
