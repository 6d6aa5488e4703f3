"""
Module: exporter

Purpose:
    Print export of the Product Capabilities document.
    Lays business content onto fixed-size pages, resolves the table of
    contents in a second pass and decorates every page before the
    ReportLab backend serializes the PDF.

Key Functions:
    - generate(): Main entry point for document generation
    - export_filename(): Download name for a generated document
    - load_settings(): Read print settings from JSON

Key Classes:
    - PrintSettings: Export dialog settings
    - GenerationResult: Complete generation result
    - GenerationError: Exception for generation failures

Dependencies:
    - reportlab: PDF generation and text metrics
    - PIL: Header logo loading
    - capdoc_toolkit.core.models: Business content

Used By:
    - Export dialogs and scripts
"""

from .settings import PrintSettings, load_settings, CLASSIFICATION_WATERMARKS
from .controller import generate, export_filename, GenerationResult, GenerationError

__all__ = [
    # Settings
    "PrintSettings",
    "load_settings",
    "CLASSIFICATION_WATERMARKS",
    # Controller
    "generate",
    "export_filename",
    "GenerationResult",
    "GenerationError",
]
