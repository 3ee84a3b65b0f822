from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from routeaudit.config import CheckConfig
from routeaudit.domain.models import Diagnostic
from routeaudit.repo.scanner import scan_python_files
from routeaudit.rules.engine import evaluate
from routeaudit.rules.reporter import CollectingSink, DiagnosticSink, report_outcome
from routeaudit.syntax.python_ast import extract_methods_from_file

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckResult:
    root: str
    files_scanned: int
    methods_checked: int
    skipped_files: list[str]
    diagnostics: list[Diagnostic]


@dataclass(frozen=True)
class _FileResult:
    rel_path: str
    methods: int
    skipped: bool


def _display_path(path: Path, base: Path) -> str:
    # repo-relative, forward slashes
    return os.path.relpath(str(path), str(base)).replace(os.sep, "/")


def check_file(path: Path, base: Path, sink: DiagnosticSink) -> _FileResult:
    """Run every method of one file through the engine, reporting into sink."""
    rel_path = _display_path(path, base)
    methods = extract_methods_from_file(path, display_path=rel_path)
    if methods is None:
        return _FileResult(rel_path=rel_path, methods=0, skipped=True)

    for method in methods:
        report_outcome(evaluate(method), sink)
    return _FileResult(rel_path=rel_path, methods=len(methods), skipped=False)


def run_check(path: Path, config: CheckConfig | None = None) -> CheckResult:
    config = config or CheckConfig()
    path = path.resolve()
    base = path if path.is_dir() else path.parent

    files = scan_python_files(path, max_files=config.max_files, exclude=config.exclude)
    log.info("checking %d python file(s) under %s", len(files), base)

    sink = CollectingSink()
    if config.workers > 1 and len(files) > 1:
        # methods are independent; only the sink is shared
        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            results = list(executor.map(lambda f: check_file(Path(f), base, sink), files))
    else:
        results = [check_file(Path(f), base, sink) for f in files]

    skipped = sorted(r.rel_path for r in results if r.skipped)
    if skipped:
        log.warning("skipped %d file(s) that could not be parsed", len(skipped))

    ignored = set(config.ignore)
    diagnostics = [d for d in sink.diagnostics if d.rule_id not in ignored]
    diagnostics.sort(key=lambda d: (d.location.path, d.location.line, d.location.column, d.rule_id))

    return CheckResult(
        root=str(base),
        files_scanned=len(files),
        methods_checked=sum(r.methods for r in results),
        skipped_files=skipped,
        diagnostics=diagnostics,
    )
