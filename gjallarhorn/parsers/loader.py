# ᛚᚨᚷᚢᛉ • Laguz - The Rune of Flowing Water (Source Loading)
"""
Walks input paths and hands every document to the matching reader.

Terraform files are grouped by directory, one Module per directory. Every
template file that contains a Resources section becomes its own Module.
A file that fails to parse is dropped with a PARSE diagnostic; its siblings
are still read.
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from gjallarhorn.diagnostics import Diagnostic, DiagnosticKind
from gjallarhorn.exceptions import ParseError
from gjallarhorn.parsers.block import Modules
from gjallarhorn.parsers.cloudformation import TEMPLATE_SUFFIXES, parse_template
from gjallarhorn.parsers.hcl import ModuleBuilder, parse_hcl
from gjallarhorn.types import Range

logger = logging.getLogger(__name__)

SKIP_DIRS = {".git", ".terraform", "node_modules", "__pycache__", ".venv", "venv", ".tox"}
SKIP_FILES = {"package.json", "package-lock.json", "tsconfig.json", "composer.json"}


@dataclass
class LoadedSources:
    """Everything read from disk for one scan."""
    terraform: Modules = field(default_factory=Modules)
    cloudformation: Modules = field(default_factory=Modules)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    files_read: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.terraform and not self.cloudformation


class SourceLoader:
    """Finds and parses Terraform and CloudFormation documents."""

    def __init__(self, exclude_paths: Sequence[str] = ()):
        self.exclude_paths = list(exclude_paths)

    def is_excluded(self, path: Path) -> bool:
        text = path.as_posix()
        for pattern in self.exclude_paths:
            if fnmatch.fnmatch(text, pattern) or any(fnmatch.fnmatch(part, pattern) for part in path.parts):
                return True
        return False

    def discover(self, paths: Iterable[str]) -> List[Path]:
        found: List[Path] = []
        for raw in paths:
            root = Path(raw)
            if root.is_file():
                if not self.is_excluded(root):
                    found.append(root)
                continue
            if not root.is_dir():
                logger.warning(f"Path does not exist: {raw}")
                continue
            for candidate in sorted(root.rglob("*")):
                if any(part in SKIP_DIRS for part in candidate.relative_to(root).parts):
                    continue
                if candidate.is_file() and not self.is_excluded(candidate):
                    found.append(candidate)
        return found

    def load(self, paths: Iterable[str]) -> LoadedSources:
        sources = LoadedSources()
        terraform_dirs: Dict[Path, List[Path]] = {}

        for path in self.discover(paths):
            suffix = path.suffix.lower()
            if suffix == ".tf":
                terraform_dirs.setdefault(path.parent, []).append(path)
            elif suffix in TEMPLATE_SUFFIXES and path.name.lower() not in SKIP_FILES:
                self._load_template(path, sources)

        for directory, files in sorted(terraform_dirs.items()):
            self._load_terraform(directory, files, sources)

        logger.info(
            f"Loaded {len(sources.terraform)} Terraform module(s) and "
            f"{len(sources.cloudformation)} template(s) from {sources.files_read} file(s)"
        )
        return sources

    def _read(self, path: Path, sources: LoadedSources) -> str:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            sources.diagnostics.append(
                Diagnostic(DiagnosticKind.PARSE, f"Could not read file: {e}", source=str(path))
            )
            return ""

    def _record_parse_error(self, path: Path, error: ParseError, sources: LoadedSources) -> None:
        logger.warning(f"Skipping {path}: {error}")
        line_range = None
        if error.line:
            line_range = Range(str(path), error.line, error.line)
        sources.diagnostics.append(
            Diagnostic(DiagnosticKind.PARSE, str(error), source=str(path), range=line_range)
        )

    def _load_terraform(self, directory: Path, files: List[Path], sources: LoadedSources) -> None:
        builder = ModuleBuilder(str(directory))
        parsed = 0
        for path in sorted(files):
            content = self._read(path, sources)
            sources.files_read += 1
            try:
                builder.add_file(str(path), parse_hcl(content, str(path)))
                parsed += 1
            except ParseError as e:
                self._record_parse_error(path, e, sources)
        if parsed:
            sources.terraform.append(builder.build())
            logger.debug(f"Parsed Terraform module {directory} ({parsed} file(s))")

    def _load_template(self, path: Path, sources: LoadedSources) -> None:
        content = self._read(path, sources)
        if not content:
            return
        try:
            module = parse_template(content, str(path))
        except ParseError as e:
            sources.files_read += 1
            self._record_parse_error(path, e, sources)
            return
        if module is None:
            logger.debug(f"Not a CloudFormation template: {path}")
            return
        sources.files_read += 1
        sources.cloudformation.append(module)
        logger.debug(f"Parsed CloudFormation template {path}")


def load_paths(paths: Iterable[str], exclude_paths: Sequence[str] = ()) -> LoadedSources:
    return SourceLoader(exclude_paths).load(paths)
