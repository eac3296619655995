import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml


logger = logging.getLogger(__name__)


YAML_FILES = [
    "comment-explorer.yaml",
    "comment-explorer.yml",
]

# Accepted and exposed, but the extraction passes are fixed and never consult it
DEFAULT_REGEX = r"//.*$|/\*[\s\S]*?\*/|<!--.*?-->|#.*$"

# Used whenever no exclude pattern is configured: VCS metadata, dependency
# directories and build output
DEFAULT_EXCLUDES = [
    "**/.git/**",
    "**/.svn/**",
    "**/.hg/**",
    "**/CVS/**",
    "**/node_modules/**",
    "**/bower_components/**",
    "**/.venv/**",
    "**/venv/**",
    "**/__pycache__/**",
    "**/dist/**",
    "**/build/**",
    "**/out/**",
    "**/target/**",
    "**/.DS_Store",
]


def expand_braces(pattern: str) -> List[str]:
    """Expand '{a,b}' alternations, nested ones included, into plain patterns.

    Gitignore-style matching has no brace syntax, so 'src/*.{js,map}' becomes
    ['src/*.js', 'src/*.map']. An unbalanced brace is kept literally.
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]
    depth = 0
    commas: List[int] = []
    end = -1
    for i in range(start, len(pattern)):
        ch = pattern[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                end = i
                break
        elif ch == "," and depth == 1:
            commas.append(i)
    if end == -1:
        return [pattern]

    bounds = [start] + commas + [end]
    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: List[str] = []
    for n in range(len(bounds) - 1):
        alt = pattern[bounds[n] + 1 : bounds[n + 1]]
        for p in expand_braces(prefix + alt + suffix):
            if p not in expanded:
                expanded.append(p)
    return expanded


@dataclass(frozen=True)
class ExplorerConfig:
    regex: str = DEFAULT_REGEX
    file_extensions: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    roots: List[str] = field(default_factory=list)

    @property
    def normalized_extensions(self) -> List[str]:
        """Configured extensions, braces expanded, without leading dots, empty entries dropped."""
        extensions: List[str] = []
        for entry in self.file_extensions:
            for e in expand_braces(entry):
                e = e.lstrip(".")
                if e.strip() and e not in extensions:
                    extensions.append(e)
        return extensions

    @property
    def effective_excludes(self) -> List[str]:
        patterns = self.exclude if self.exclude else DEFAULT_EXCLUDES
        return [p for pattern in patterns for p in expand_braces(pattern)]

    def with_overrides(
        self,
        file_extensions: Optional[List[str]] = None,
        exclude: Optional[List[str]] = None,
        roots: Optional[List[str]] = None,
    ) -> "ExplorerConfig":
        return ExplorerConfig(
            regex=self.regex,
            file_extensions=list(file_extensions) if file_extensions is not None else list(self.file_extensions),
            exclude=list(exclude) if exclude is not None else list(self.exclude),
            roots=list(roots) if roots is not None else list(self.roots),
        )


def _load_yaml(path: str) -> Dict:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Config {path} is not valid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must contain a mapping at the top level")
    return data


def _string_list(data: Dict, key: str) -> List[str]:
    value: Any = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Config '{key}' must be a list of strings")
    return [v.strip() for v in value if v.strip()]


def _find_config_file(base: str) -> Optional[str]:
    for name in YAML_FILES:
        p = os.path.join(base, name)
        if os.path.exists(p):
            return p
    return None


def load_config(path_or_dir: Optional[str] = None) -> ExplorerConfig:
    """Load configuration from YAML.

    If path_or_dir is a file, load that file; it must exist. If it's a
    directory (or None, meaning the current directory), look for one of the
    known YAML names there and fall back to defaults when none is present.

    Relative entries in 'roots' are resolved against the directory holding
    the configuration file.
    """
    candidate = os.path.abspath(path_or_dir) if path_or_dir else os.getcwd()
    if os.path.isdir(candidate):
        config_file_path = _find_config_file(candidate)
        if config_file_path is None:
            logger.debug("No config file in %s, using defaults", candidate)
            return ExplorerConfig()
    elif os.path.exists(candidate):
        config_file_path = candidate
    else:
        raise FileNotFoundError(f"Config file not found: {candidate}")

    logger.info("Loading config from %s", config_file_path)
    data = _load_yaml(config_file_path)

    regex = data.get("regex", DEFAULT_REGEX)
    if not isinstance(regex, str) or not regex:
        raise ValueError("Config 'regex' must be a non-empty string")

    file_extensions = _string_list(data, "fileExtensions")
    exclude = _string_list(data, "exclude")

    base_dir = os.path.dirname(config_file_path)
    roots = [
        r if os.path.isabs(r) else os.path.normpath(os.path.join(base_dir, r))
        for r in _string_list(data, "roots")
    ]

    return ExplorerConfig(regex=regex, file_extensions=file_extensions, exclude=exclude, roots=roots)
