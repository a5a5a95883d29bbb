"""
Source file enumeration for batch extraction.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

from .encoding import read_text_safely

logger = logging.getLogger(__name__)

SKIP_DIRS = {
    "node_modules", ".git", ".hg", ".svn", "dist", "build", "coverage",
    ".nuxt", ".output", ".svelte-kit", ".next", "__pycache__", ".venv",
}

LANGUAGE_IDS = {
    ".vue": "vue",
    ".svelte": "svelte",
    ".html": "vue-html",
    ".htm": "vue-html",
    ".ejs": "ejs",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".jsx": "javascriptreact",
    ".tsx": "typescriptreact",
}

DEFAULT_EXTENSIONS = tuple(LANGUAGE_IDS)


def language_id_for(path: Path) -> Optional[str]:
    return LANGUAGE_IDS.get(Path(path).suffix.lower())


def read_gitignore(root: Path) -> List[str]:
    """Plain patterns from `<root>/.gitignore`; negations are not supported."""
    gitignore = Path(root) / ".gitignore"
    if not gitignore.is_file():
        return []
    text = read_text_safely(gitignore)
    if text is None:
        logger.warning(f"Could not read {gitignore}")
        return []
    patterns = []
    lines = text.splitlines()
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("!"):
            continue
        patterns.append(line)
    return patterns


def _is_ignored(rel_path: str, patterns: Sequence[str]) -> bool:
    name = rel_path.rsplit("/", 1)[-1]
    for pattern in patterns:
        anchored = pattern.startswith("/")
        pat = pattern.strip("/")
        if not pat:
            continue
        if anchored or "/" in pat:
            if fnmatch.fnmatch(rel_path, pat) or rel_path.startswith(pat + "/"):
                return True
        elif fnmatch.fnmatch(name, pat) or any(fnmatch.fnmatch(part, pat) for part in rel_path.split("/")[:-1]):
            return True
    return False


def list_files(root: Path, ignore_rules: Iterable[str] = (),
               extensions: Optional[Sequence[str]] = None) -> Set[Path]:
    """
    Collect source files under `root`:
    - skips vendored/build directories and anything matched by the root
      .gitignore or `ignore_rules` (fnmatch patterns)
    - keeps only `extensions` (all known source types by default)
    A file path given as `root` is returned as-is when it passes the filters.
    """
    root = Path(root)
    exts = tuple(e.lower() for e in (extensions or DEFAULT_EXTENSIONS))
    patterns = list(ignore_rules)

    if root.is_file():
        return {root.resolve()} if root.suffix.lower() in exts else set()

    patterns += read_gitignore(root)
    found: Set[Path] = set()
    for dirpath, dirs, files in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        rel_dir = "" if rel_dir == "." else rel_dir + "/"
        dirs[:] = sorted(
            d for d in dirs
            if d not in SKIP_DIRS and not _is_ignored(rel_dir + d, patterns)
        )
        for f in files:
            if not f.lower().endswith(exts):
                continue
            if _is_ignored(rel_dir + f, patterns):
                continue
            found.add((Path(dirpath) / f).resolve())
    logger.debug(f"Found {len(found)} source file(s) under {root}")
    return found
