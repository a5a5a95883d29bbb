"""
Batch extraction
================

Runs detection on a document, mints a key for every hard-coded string with a
bounded pool of workers, rewrites the document in one multi-range edit and
hands the extracted texts to the translation store.
"""

from __future__ import annotations

import asyncio
import difflib
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..utils.file_scanner import list_files
from .detection import HardStringDetector
from .documents import DocumentSource, apply_replacements
from .exceptions import ExtractionCancelled
from .frameworks import Framework, FrameworkRegistry
from .hard_string import parse_hard_string
from .keygen import KeyGenerator, UsedKeys
from .models import (
    Document,
    ExtractionPlanItem,
    ExtractionReport,
    ExtractionStatus,
    Occurrence,
    TranslationRecord,
)
from .progress import CancellationToken, LoggingReporter, NotificationKind, ProgressReporter
from .settings import ExtractionSettings
from .store import FileChooser, TranslationStore


class BatchExtractor:
    def __init__(
        self,
        settings: ExtractionSettings,
        source: DocumentSource,
        store: TranslationStore,
        registry: Optional[FrameworkRegistry] = None,
        key_generator: Optional[KeyGenerator] = None,
        translator=None,
        reporter: Optional[ProgressReporter] = None,
        chooser: Optional[FileChooser] = None,
        project_root: Optional[Path] = None,
    ):
        self.settings = settings
        self.source = source
        self.store = store
        self.registry = registry or FrameworkRegistry(settings, project_root)
        self.detector = HardStringDetector(self.registry, settings)
        self.key_generator = key_generator or KeyGenerator(settings, store, translator)
        self.reporter = reporter or LoggingReporter()
        self.chooser = chooser
        self.logger = logging.getLogger(__name__)

    async def extract_document(self, document: Document,
                               token: Optional[CancellationToken] = None) -> ExtractionReport:
        token = token or CancellationToken()
        report = ExtractionReport(path=document.path, status=ExtractionStatus.SKIPPED)

        occurrences = self.detector.run(document)
        self.logger.info(f"Extracting [{len(occurrences or [])}] {document.path}")
        if not occurrences:
            return report
        report.detected = len(occurrences)
        framework = self.registry.for_document(document.language_id)
        locale = self.settings.display_language

        # One destination for the whole document, picked from the first string
        first_key = await self.key_generator.generate(occurrences[0].key_text, document.path)
        try:
            target_file = await self.store.resolve_target_file(first_key, locale, self.chooser)
        except ExtractionCancelled:
            target_file = None
        if target_file is None:
            self.reporter.notify(NotificationKind.WARNING, "Extraction cancelled")
            report.status = ExtractionStatus.CANCELLED
            return report

        try:
            plan = await self._build_plan(document, framework, occurrences, token)

            if token.is_cancelled:
                self.reporter.notify(NotificationKind.WARNING, "Extraction cancelled by user")
                report.status = ExtractionStatus.CANCELLED
                return report

            report.dropped = len(occurrences) - len(plan)
            if not plan:
                self.logger.warning(f"Nothing to extract in {document.path}")
                return report

            self._commit(document, plan, target_file)
            self.reporter.notify(NotificationKind.INFO, "Extraction done")
        except Exception as e:
            self.logger.error(f"Extraction of {document.path} failed: {e}")
            self.reporter.notify(NotificationKind.ERROR, "Extraction failed")
            report.status = ExtractionStatus.FAILED
            report.error = str(e)
            return report

        report.status = ExtractionStatus.DONE
        report.extracted = len(plan)
        report.keys = [item.keypath for item in plan]
        return report

    async def _build_plan(self, document: Document, framework: Framework,
                          occurrences: List[Occurrence], token: CancellationToken) -> List[ExtractionPlanItem]:
        used_keys = UsedKeys()
        semaphore = asyncio.Semaphore(self.settings.concurrency)
        counter_lock = asyncio.Lock()
        total = len(occurrences)
        finished = 0

        async def worker(index: int, occurrence: Occurrence) -> Optional[ExtractionPlanItem]:
            nonlocal finished
            async with semaphore:
                if token.is_cancelled:
                    return None
                self.reporter.report(finished / total, f"({index + 1}/{total})")
                item = await self._plan_occurrence(document, framework, occurrence, used_keys)
                if item is not None:
                    async with counter_lock:
                        finished += 1
                        self.reporter.report(finished / total, f"{finished}/{total}")
                return item

        tasks = [asyncio.ensure_future(worker(i, o)) for i, o in enumerate(occurrences)]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # No worker may outlive a failed document
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [item for item in results if item is not None]

    async def _plan_occurrence(self, document: Document, framework: Framework,
                               occurrence: Occurrence, used_keys: UsedKeys) -> Optional[ExtractionPlanItem]:
        if occurrence.raw_text and not occurrence.text:
            parsed = parse_hard_string(occurrence.raw_text, document.language_id, occurrence.is_dynamic)
            if parsed is None:
                self.logger.warning(f"Nothing left to extract from {occurrence.raw_text!r} in {document.path}")
                return None
            occurrence.text = parsed.text
            occurrence.args = parsed.args

        keypath, reused = await self.key_generator.generate_key(
            occurrence.key_text, document.path, reuse_existing=True, used_keys=used_keys
        )
        if not keypath:
            return None

        templates = [t for t in framework.refactor_templates(keypath, occurrence.args, occurrence.source) if t]
        if not templates:
            line, column = document.position_at(occurrence.start)
            self.logger.warning(f'No refactor template found for "{keypath}" in "{document.path}:{line}:{column}"')
            return None

        start, end, replacement = occurrence.start, occurrence.end, templates[0]
        if occurrence.is_attribute:
            rewrite = framework.rewrite_attribute(occurrence, templates[0])
            if rewrite is not None:
                start, end, replacement = rewrite

        return ExtractionPlanItem(
            start=start,
            end=end,
            replacement=replacement,
            keypath=keypath,
            message=occurrence.text,
            locale=self.settings.display_language,
            reused=reused,
        )

    def _commit(self, document: Document, plan: List[ExtractionPlanItem], target_file: Path):
        edits = [(item.start, item.end, item.replacement) for item in plan]
        records = [
            TranslationRecord(
                keypath=item.keypath,
                value=item.message,
                locale=item.locale,
                source_file=str(document.path),
                target_file=str(target_file),
            )
            for item in plan
            if not item.reused
        ]

        if self.settings.dry_run:
            new_text = apply_replacements(document.text, edits)
            diff = ''.join(difflib.unified_diff(
                document.text.splitlines(keepends=True),
                new_text.splitlines(keepends=True),
                fromfile=str(document.path),
                tofile=f"{document.path} (extracted)",
            ))
            self.logger.info(f"Dry run, {document.path} left untouched:\n{diff}")
            for record in records:
                self.logger.info(f"  {record.keypath} = {record.value!r} -> {target_file}")
            return

        self.source.apply_edits(document, edits)
        if records:
            self.store.write_entries(records)
        if self.settings.save_after_extract:
            self.source.save_document(document)
        self.store.invalidate()

    async def extract_paths(self, paths: Iterable[Union[str, Path]],
                            token: Optional[CancellationToken] = None) -> List[ExtractionReport]:
        """Extract every file under `paths`, one document at a time."""
        token = token or CancellationToken()
        files: List[Path] = []
        seen = set()
        for path in paths:
            path = Path(path)
            candidates = sorted(list_files(path, self.settings.ignore_globs)) if path.is_dir() else [path.resolve()]
            for candidate in candidates:
                if candidate not in seen:
                    seen.add(candidate)
                    files.append(candidate)

        self.logger.info(f"Bulk extracting {len(files)} file(s)")
        reports: List[ExtractionReport] = []
        for path in files:
            if token.is_cancelled:
                self.logger.warning("Bulk extraction cancelled")
                break
            try:
                document = self.source.open_document(path)
                reports.append(await self.extract_document(document, token))
            except Exception as e:
                self.logger.error(f"Failed to extract {path}: {e}")
                reports.append(ExtractionReport(path=path, status=ExtractionStatus.FAILED, error=str(e)))
        return reports
