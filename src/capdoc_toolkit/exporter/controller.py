"""
Module: exporter.controller

Purpose:
    Orchestrate one generation of the capabilities document.
    Settings → Geometry → Assemble sections (ToC reserved in place) →
    Resolve ToC → Decorate → Serialize

Key Functions:
    - generate(): Main entry point, returns the PDF bytes and layout facts
    - export_filename(): Download file name for a generated document

Key Classes:
    - GenerationResult: Complete generation result
    - GenerationError: Exception for generation failures

Dependencies:
    - exporter.layout: Cursor, page breaks, ToC registry
    - exporter.output: Backend, ToC pass, decoration pass
    - exporter.sections: Section assembly
    - utils.logging_utils: Optional log forwarding to a console queue

Used By:
    - Export dialogs and scripts producing the capabilities PDF
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date
from queue import Queue
from typing import Any, Callable, List, Optional, Union

from capdoc_toolkit.core.models import CapabilitiesContent
from capdoc_toolkit.utils.logging_utils import forward_logs

from .layout.config import LayoutConfig
from .layout.cursor import LayoutCursor
from .layout.models import TocEntry
from .output.backend import BackendError, RenderBackend, ReportLabBackend
from .output.decorations import DecorationPass
from .output.toc import DeferredResolutionPass
from .sections import SectionAssembler, estimate_toc_entries
from .settings import PrintSettings

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]


class GenerationError(Exception):
    """Error during document generation."""
    pass


@dataclass(frozen=True)
class GenerationResult:
    """
    Complete generation result (immutable).

    Attributes:
        pdf_bytes: Serialized document
        page_count: Number of pages, cover included
        toc_entries: Sections recorded during assembly, in reading order
        page_sections: Section label of each page (index-aligned)
        warnings: Overflow and ToC warnings raised during generation

    Example:
        >>> result = generate(PrintSettings(), content)
        >>> print(f"Generated {result.page_count} pages")
    """

    pdf_bytes: bytes
    page_count: int
    toc_entries: tuple[TocEntry, ...]
    page_sections: tuple[str, ...]
    warnings: tuple[str, ...]


class _ProgressReporter:
    """Forwards milestones to an optional callback; callback errors are logged, not raised."""

    def __init__(self, callback: Optional[ProgressCallback]) -> None:
        self.callback = callback

    def __call__(self, percent: int, message: str) -> None:
        logger.debug(f"[{percent:3d}%] {message}")
        if self.callback is None:
            return
        try:
            self.callback(percent, message)
        except Exception as e:
            logger.warning(f"Progress callback failed at {percent}%: {e}")


def generate(
    settings: Union[PrintSettings, dict[str, Any], None] = None,
    content: Union[CapabilitiesContent, dict[str, Any], None] = None,
    on_progress: Optional[ProgressCallback] = None,
    *,
    backend: Optional[RenderBackend] = None,
    today: Optional[date] = None,
    log_queue: Optional[Queue] = None,
) -> GenerationResult:
    """
    Generate the capabilities document.

    Pipeline:
    1. Resolve settings and page geometry
    2. Front matter: cover, document control, legal notice
    3. Reserve the table of contents pages
    4. Body sections: overview, platform at a glance, acts, cross-cutting
    5. Back matter: glossary, quick reference
    6. Resolve the ToC with the recorded page numbers
    7. Decorate every page, now that the total is known
    8. Serialize

    Args:
        settings: Print settings, a settings dict (camelCase or snake_case) or None for defaults
        content: Business content, a content dict or None for an empty document body
        on_progress: Called as (percent, message) at coarse milestones
        backend: Render backend, defaults to a ReportLabBackend for the page size
        today: Date for the cover and the "Printed:" footer, defaults to today
        log_queue: Receives (message, level) pairs for package log records at
            INFO and above while this run lasts, for an export console

    Returns:
        GenerationResult with the PDF bytes and layout facts

    Raises:
        GenerationError: If drawing or serialization fails; no partial output
    """
    if log_queue is None:
        return _generate(settings, content, on_progress, backend, today)
    with forward_logs(log_queue):
        return _generate(settings, content, on_progress, backend, today)


def _generate(
    settings: Union[PrintSettings, dict[str, Any], None],
    content: Union[CapabilitiesContent, dict[str, Any], None],
    on_progress: Optional[ProgressCallback],
    backend: Optional[RenderBackend],
    today: Optional[date],
) -> GenerationResult:
    start_time = time.perf_counter()
    settings = _resolve_settings(settings)
    content = _resolve_content(content)
    today = today or date.today()
    progress = _ProgressReporter(on_progress)

    try:
        config = LayoutConfig.from_settings(settings.layout)
    except ValueError as e:
        raise GenerationError(f"Invalid page geometry: {e}") from e

    if backend is None:
        backend = ReportLabBackend(
            config.page_width,
            config.page_height,
            title=settings.document.title,
            author=settings.document.copyright_holder,
        )

    logger.info(
        f"Generating '{settings.document.title}' v{settings.document.version} "
        f"({settings.layout.page_size} {settings.layout.orientation}, {content.module_count} modules)"
    )

    try:
        layout = LayoutCursor(backend, config)
        assembler = SectionAssembler(layout, settings, content, today)
        toc = DeferredResolutionPass(
            config,
            title_color=settings.branding.secondary_rgb,
            max_level=settings.sections.toc_depth,
        )
        _assemble(assembler, toc, settings, content, progress)

        if layout.page_count == 0:
            logger.warning("Every section is disabled; emitting a single blank page")
            assembler.blank_page()

        progress(92, "Rendering table of contents...")
        toc.resolve(backend, layout.registry.entries)

        progress(95, "Applying headers and footers...")
        DecorationPass(settings, config, today).apply_all(backend, layout.pages)

        pdf_bytes = backend.serialize()
    except BackendError as e:
        raise GenerationError(f"Rendering failed: {e}") from e

    warnings: List[str] = layout.warnings + toc.warnings
    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Generated {backend.page_count} pages, {len(layout.registry)} ToC entries "
        f"in {elapsed:.2f}s"
    )
    progress(100, "PDF generation complete!")

    return GenerationResult(
        pdf_bytes=pdf_bytes,
        page_count=backend.page_count,
        toc_entries=layout.registry.entries,
        page_sections=tuple(page.section for page in layout.pages),
        warnings=tuple(warnings),
    )


def _assemble(
    assembler: SectionAssembler,
    toc: DeferredResolutionPass,
    settings: PrintSettings,
    content: CapabilitiesContent,
    progress: _ProgressReporter,
) -> None:
    """Push every enabled section through the cursor in reading order."""
    document = settings.document
    sections = settings.sections

    progress(5, "Creating cover page...")
    if document.include_cover:
        assembler.cover()

    progress(10, "Creating document control page...")
    if document.include_document_control:
        assembler.document_control()

    progress(15, "Creating legal page...")
    if document.include_legal_page:
        assembler.legal_notice()

    progress(20, "Creating table of contents...")
    if sections.include_table_of_contents:
        toc.reserve(assembler.cursor, estimate_toc_entries(settings, content))

    progress(25, "Creating executive overview...")
    if sections.include_executive_overview:
        assembler.executive_overview()

    progress(35, "Creating platform overview...")
    if sections.include_platform_at_glance:
        assembler.platform_at_glance()

    progress(45, "Creating module pages...")
    if sections.include_module_details:
        for index, act in enumerate(content.acts):
            assembler.act(act)
            progress(min(45 + (index + 1) * 5, 79), f"Processed {act.title}...")

    progress(80, "Creating cross-cutting capabilities...")
    if sections.include_cross_cutting:
        assembler.cross_cutting()

    progress(88, "Creating back matter...")
    if sections.include_glossary:
        assembler.glossary()
    if sections.include_quick_reference:
        assembler.quick_reference()


def _resolve_settings(settings: Union[PrintSettings, dict[str, Any], None]) -> PrintSettings:
    if settings is None:
        return PrintSettings()
    if isinstance(settings, PrintSettings):
        return settings
    return PrintSettings.from_dict(settings)


def _resolve_content(content: Union[CapabilitiesContent, dict[str, Any], None]) -> CapabilitiesContent:
    if content is None:
        return CapabilitiesContent()
    if isinstance(content, CapabilitiesContent):
        return content
    return CapabilitiesContent.from_dict(content)


def export_filename(settings: PrintSettings, today: Optional[date] = None) -> str:
    """
    Download name for a generated document.

    Example:
        >>> export_filename(PrintSettings(), date(2025, 3, 1))
        'Intelli-HRM-Product-Capabilities-1.0-2025-03-01.pdf'
    """
    today = today or date.today()
    return f"Intelli-HRM-Product-Capabilities-{settings.document.version}-{today.isoformat()}.pdf"
