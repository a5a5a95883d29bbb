"""
Hard-string detection for a single document.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .frameworks import FrameworkRegistry
from .models import Document, Occurrence
from .settings import ExtractionSettings


class HardStringDetector:
    """Runs the document's framework adapter and filters its findings."""

    def __init__(self, registry: FrameworkRegistry, settings: Optional[ExtractionSettings] = None):
        self.registry = registry
        self.settings = settings or registry.settings
        self.logger = logging.getLogger(__name__)

    def run(self, document: Document, is_auto: bool = False) -> Optional[List[Occurrence]]:
        """Return the extractable occurrences sorted by position.

        None means no framework handles the document, which callers treat
        as "skip".
        """
        framework = self.registry.for_document(document.language_id, is_auto)
        if framework is None:
            self.logger.debug(f"No framework for {document.path} ({document.language_id})")
            return None

        found = framework.detect_hard_strings(document, self.settings)
        usages = framework.existing_usage_spans(document.text)

        seen = set()
        result: List[Occurrence] = []
        for occurrence in found:
            if occurrence.is_attribute and framework.is_bound_attribute(occurrence):
                continue
            if any(start <= occurrence.start and occurrence.end <= end for _key, start, end in usages):
                continue
            span = (occurrence.start, occurrence.end)
            if span in seen:
                continue
            seen.add(span)
            result.append(occurrence)

        result.sort(key=lambda o: o.start)
        self.logger.debug(
            f"{document.path}: {len(result)} hard string(s) via {framework.id} "
            f"({len(found) - len(result)} filtered)"
        )
        return result
