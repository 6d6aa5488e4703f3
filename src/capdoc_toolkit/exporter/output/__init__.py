"""
Module: exporter.output

Purpose:
    Drawing backend and the passes that run after assembly.

Key Classes:
    - RenderBackend / ReportLabBackend: Drawing, measurement, PDF output
    - DeferredResolutionPass: Two-pass table of contents
    - DecorationPass: Headers, footers, page numbers, watermarks

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling

Used By:
    - exporter.controller: Generation pass
"""

from .backend import RenderBackend, ReportLabBackend, DrawOp, BackendError, PageIndexError, load_image
from .toc import DeferredResolutionPass
from .decorations import DecorationPass, format_page_number, resolve_watermark

__all__ = [
    "RenderBackend",
    "ReportLabBackend",
    "load_image",
    "DrawOp",
    "BackendError",
    "PageIndexError",
    "DeferredResolutionPass",
    "DecorationPass",
    "format_page_number",
    "resolve_watermark",
]
