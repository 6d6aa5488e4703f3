"""
Module: exporter.settings

Purpose:
    Print settings for the capabilities document. Immutable configuration
    tree mirroring the export dialog: layout, document metadata, section
    toggles, branding and header/footer options.

    Settings are never a reason for generation to fail. Malformed colours,
    unknown option values and missing keys fall back to documented defaults
    with a warning.

Key Classes:
    - PrintSettings: Root settings object
    - ClassificationWatermark: Watermark/footer text per classification

Key Functions:
    - hex_to_rgb(): Parse "#rrggbb" with fallback
    - load_settings(): Read settings from a JSON file

Dependencies:
    - dataclasses (std)
    - core.utils.serialization: camelCase key handling

Used By:
    - exporter.controller: generate() entry point
    - exporter.layout.config: Page geometry
    - exporter.output.decorations: Header/footer/watermark pass
"""

from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from capdoc_toolkit.core.utils.serialization import load_json_payload, normalize_keys

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

DEFAULT_BRAND_RGB: RGB = (79, 70, 229)
_HEX_PATTERN = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)

ORIENTATIONS = ("portrait", "landscape")
PAGE_SIZES = ("A4", "Letter", "Legal")
CLASSIFICATIONS = ("draft", "confidential", "internal", "customer", "sample")
DOCUMENT_STATUSES = ("draft", "review", "approved", "published", "archived")
COVER_STYLES = ("branded", "corporate", "minimal")
WATERMARK_TYPES = ("none", "classification", "custom", "date-based")
HEADER_STYLES = ("branded", "simple", "none")
PAGE_NUMBER_FORMATS = ("simple", "page", "pageOf", "pageOfTotal")
PAGE_NUMBER_POSITIONS = ("left", "center", "right")


def hex_to_rgb(value: Optional[str], default: RGB = DEFAULT_BRAND_RGB) -> RGB:
    """
    Parse a hex colour string.

    Args:
        value: Colour like "#4f46e5" or "4f46e5"
        default: Returned when the value cannot be parsed

    Returns:
        (r, g, b) tuple of 0-255 ints

    Example:
        >>> hex_to_rgb("#ff0000")
        (255, 0, 0)
        >>> hex_to_rgb("not-a-colour")
        (79, 70, 229)
    """
    match = _HEX_PATTERN.match(value or "")
    if not match:
        if value:
            logger.warning(f"Invalid colour {value!r}, using {default}")
        return default
    return tuple(int(part, 16) for part in match.groups())  # type: ignore[return-value]


@dataclass(frozen=True)
class ClassificationWatermark:
    """
    Watermark and footer text for a document classification.

    Attributes:
        text: Watermark stamp text ("" disables the stamp)
        opacity: Stamp opacity, 0-1
        footer_text: Left footer text ("" falls back to footer_content)
    """

    text: str
    opacity: float
    footer_text: str


CLASSIFICATION_WATERMARKS: dict[str, ClassificationWatermark] = {
    "draft": ClassificationWatermark("DRAFT", 0.15, "DRAFT - Not for distribution"),
    "confidential": ClassificationWatermark("CONFIDENTIAL", 0.12, "CONFIDENTIAL - Authorized personnel only"),
    "internal": ClassificationWatermark("INTERNAL USE ONLY", 0.08, "Internal Use Only"),
    "customer": ClassificationWatermark("", 0.0, ""),
    "sample": ClassificationWatermark("SAMPLE", 0.10, "Sample Documentation"),
}


# ─────────────────────────────────────────────────────────────────────────────
# Field coercion
# ─────────────────────────────────────────────────────────────────────────────

def _choice(value: Any, allowed: Iterable[str], default: str, name: str) -> str:
    if value is None:
        return default
    allowed = tuple(allowed)
    if value in allowed:
        return value
    # Case-insensitive match ("a4", "PORTRAIT")
    for option in allowed:
        if isinstance(value, str) and value.lower() == option.lower():
            return option
    logger.warning(f"Unknown {name} {value!r}, using {default!r}")
    return default


def _number(value: Any, default: float, name: str) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {name} {value!r}, using {default}")
        return default


def _flag(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _string(value: Any, default: str) -> str:
    return default if value is None else str(value)


def _coerce(cls: type, data: Any) -> dict[str, Any]:
    """Pick known fields of ``cls`` from a camel/snake dict, ignoring extras."""
    data = normalize_keys(data)
    names = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(data) - names)
    if unknown:
        logger.debug(f"Ignoring unknown {cls.__name__} keys: {unknown}")
    return {key: value for key, value in data.items() if key in names}


# ─────────────────────────────────────────────────────────────────────────────
# Settings groups
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Margins:
    """Page margins in millimetres."""

    top: float = 25.0
    bottom: float = 25.0
    left: float = 20.0
    right: float = 20.0

    @classmethod
    def from_dict(cls, data: Any) -> Margins:
        raw = _coerce(cls, data)
        default = cls()
        return cls(**{
            name: _number(raw.get(name), getattr(default, name), f"margin {name}")
            for name in ("top", "bottom", "left", "right")
        })


@dataclass(frozen=True)
class LayoutSettings:
    orientation: str = "portrait"
    page_size: str = "A4"
    margins: Margins = field(default_factory=Margins)

    @classmethod
    def from_dict(cls, data: Any) -> LayoutSettings:
        raw = _coerce(cls, data)
        return cls(
            orientation=_choice(raw.get("orientation"), ORIENTATIONS, "portrait", "orientation"),
            page_size=_choice(raw.get("page_size"), PAGE_SIZES, "A4", "page size"),
            margins=Margins.from_dict(raw.get("margins")),
        )


@dataclass(frozen=True)
class RevisionEntry:
    version: str = ""
    date: str = ""
    author: str = ""
    changes: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> RevisionEntry:
        raw = _coerce(cls, data)
        return cls(**{name: _string(value, "") for name, value in raw.items()})


@dataclass(frozen=True)
class DocumentSettings:
    """
    Document metadata and front-matter toggles.

    Attributes:
        title: Document title (cover, document control)
        subtitle: Cover subtitle
        version: Version string shown as "vX" in branded headers
        document_id: Identifier shown in the footer center zone
        classification: One of CLASSIFICATIONS
        status: One of DOCUMENT_STATUSES
        include_cover: Render a cover page at index 0
        cover_style: branded | corporate | minimal
        include_document_control: Render the document control page
        include_legal_page: Render the legal notice page
        revisions: Revision history rows
    """

    title: str = "Intelli HRM Product Capabilities"
    subtitle: str = "Complete Human Resource Management Platform"
    version: str = "1.0"
    document_id: str = "IHRM-PC-001"
    classification: str = "internal"
    status: str = "draft"
    owner: str = ""
    approver: str = ""
    distribution: tuple[str, ...] = ()
    effective_date: str = ""
    review_date: str = ""
    copyright_holder: str = "Intelli HRM"
    copyright_year: str = "2025"
    disclaimer_text: str = (
        "This document is provided for informational purposes only. Features and "
        "capabilities are subject to change without notice."
    )
    forward_looking_text: str = (
        "Statements regarding future functionality reflect current plans and are "
        "not commitments to deliver any feature by any date."
    )
    include_cover: bool = True
    cover_style: str = "branded"
    include_document_control: bool = False
    include_legal_page: bool = False
    revisions: tuple[RevisionEntry, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> DocumentSettings:
        raw = _coerce(cls, data)
        default = cls()
        text_fields = (
            "title", "subtitle", "version", "document_id", "owner", "approver",
            "effective_date", "review_date", "copyright_holder", "copyright_year",
            "disclaimer_text", "forward_looking_text",
        )
        values: dict[str, Any] = {
            name: _string(raw.get(name), getattr(default, name)) for name in text_fields
        }
        distribution = raw.get("distribution") or ()
        if isinstance(distribution, str):
            distribution = (distribution,)
        return cls(
            **values,
            classification=_choice(raw.get("classification"), CLASSIFICATIONS, default.classification, "classification"),
            status=_choice(raw.get("status"), DOCUMENT_STATUSES, default.status, "status"),
            distribution=tuple(str(d) for d in distribution),
            include_cover=_flag(raw.get("include_cover"), default.include_cover),
            cover_style=_choice(raw.get("cover_style"), COVER_STYLES, default.cover_style, "cover style"),
            include_document_control=_flag(raw.get("include_document_control"), default.include_document_control),
            include_legal_page=_flag(raw.get("include_legal_page"), default.include_legal_page),
            revisions=tuple(
                RevisionEntry.from_dict(r) for r in (raw.get("revisions") or ()) if isinstance(r, dict)
            ),
        )


@dataclass(frozen=True)
class SectionSettings:
    """Which document sections are assembled, and how modules break pages."""

    include_table_of_contents: bool = True
    toc_depth: int = 2
    include_executive_overview: bool = True
    include_platform_at_glance: bool = True
    include_act_dividers: bool = True
    include_module_details: bool = True
    module_starts_new_page: bool = True
    include_cross_cutting: bool = True
    include_glossary: bool = True
    include_quick_reference: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> SectionSettings:
        raw = _coerce(cls, data)
        default = cls()
        depth = int(_number(raw.get("toc_depth"), default.toc_depth, "toc depth"))
        if depth not in (1, 2, 3):
            logger.warning(f"Unsupported toc depth {depth}, using {default.toc_depth}")
            depth = default.toc_depth
        flags = {
            f.name: _flag(raw.get(f.name), getattr(default, f.name))
            for f in dataclasses.fields(cls)
            if f.name != "toc_depth"
        }
        return cls(toc_depth=depth, **flags)


@dataclass(frozen=True)
class BrandingSettings:
    """
    Colours and watermark configuration.

    Colours stay as the user typed them; use the *_rgb properties, which
    fall back to the default brand colour for malformed input.
    """

    primary_color: str = "#4f46e5"
    secondary_color: str = "#1e293b"
    accent_color: str = "#0ea5e9"
    use_act_colors: bool = True
    watermark_type: str = "none"
    watermark_text: str = ""
    watermark_opacity: float = 0.1
    watermark_expiry_date: str = ""
    logo_path: Optional[str] = None

    @property
    def primary_rgb(self) -> RGB:
        return hex_to_rgb(self.primary_color)

    @property
    def secondary_rgb(self) -> RGB:
        return hex_to_rgb(self.secondary_color)

    @property
    def accent_rgb(self) -> RGB:
        return hex_to_rgb(self.accent_color)

    @classmethod
    def from_dict(cls, data: Any) -> BrandingSettings:
        raw = _coerce(cls, data)
        default = cls()
        opacity = _number(raw.get("watermark_opacity"), default.watermark_opacity, "watermark opacity")
        logo = raw.get("logo_path")
        return cls(
            primary_color=_string(raw.get("primary_color"), default.primary_color),
            secondary_color=_string(raw.get("secondary_color"), default.secondary_color),
            accent_color=_string(raw.get("accent_color"), default.accent_color),
            use_act_colors=_flag(raw.get("use_act_colors"), default.use_act_colors),
            watermark_type=_choice(raw.get("watermark_type"), WATERMARK_TYPES, default.watermark_type, "watermark type"),
            watermark_text=_string(raw.get("watermark_text"), default.watermark_text),
            watermark_opacity=min(max(opacity, 0.0), 1.0),
            watermark_expiry_date=_string(raw.get("watermark_expiry_date"), default.watermark_expiry_date),
            logo_path=str(logo) if logo else None,
        )


@dataclass(frozen=True)
class HeaderFooterSettings:
    """Static decoration configuration applied by the decoration pass."""

    include_headers: bool = True
    header_style: str = "branded"
    header_content: str = "Intelli HRM Product Capabilities"
    show_section_name: bool = True
    show_version_in_header: bool = True
    show_header_accent_line: bool = True
    show_logo: bool = False
    use_alternating_headers: bool = False
    include_footers: bool = True
    footer_content: str = "Intelli HRM"
    show_footer_accent_line: bool = True
    show_document_id: bool = True
    show_print_date: bool = True
    show_copyright: bool = False
    include_page_numbers: bool = True
    page_number_format: str = "pageOf"
    page_number_position: str = "right"

    @classmethod
    def from_dict(cls, data: Any) -> HeaderFooterSettings:
        raw = _coerce(cls, data)
        default = cls()
        values: dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            current = getattr(default, f.name)
            if isinstance(current, bool):
                values[f.name] = _flag(raw.get(f.name), current)
        return cls(
            **values,
            header_style=_choice(raw.get("header_style"), HEADER_STYLES, default.header_style, "header style"),
            header_content=_string(raw.get("header_content"), default.header_content),
            footer_content=_string(raw.get("footer_content"), default.footer_content),
            page_number_format=_choice(
                raw.get("page_number_format"), PAGE_NUMBER_FORMATS, default.page_number_format, "page number format"
            ),
            page_number_position=_choice(
                raw.get("page_number_position"), PAGE_NUMBER_POSITIONS, default.page_number_position, "page number position"
            ),
        )


@dataclass(frozen=True)
class PrintSettings:
    """
    Complete export configuration (immutable).

    Example:
        >>> settings = PrintSettings.from_dict({"document": {"includeCover": False}})
        >>> settings.document.include_cover
        False
        >>> settings.layout.page_size
        'A4'
    """

    layout: LayoutSettings = field(default_factory=LayoutSettings)
    document: DocumentSettings = field(default_factory=DocumentSettings)
    sections: SectionSettings = field(default_factory=SectionSettings)
    branding: BrandingSettings = field(default_factory=BrandingSettings)
    headers: HeaderFooterSettings = field(default_factory=HeaderFooterSettings)

    @property
    def classification_watermark(self) -> ClassificationWatermark:
        return CLASSIFICATION_WATERMARKS[self.document.classification]

    @classmethod
    def from_dict(cls, data: Any) -> PrintSettings:
        raw = normalize_keys(data)
        return cls(
            layout=LayoutSettings.from_dict(raw.get("layout")),
            document=DocumentSettings.from_dict(raw.get("document")),
            sections=SectionSettings.from_dict(raw.get("sections")),
            branding=BrandingSettings.from_dict(raw.get("branding")),
            headers=HeaderFooterSettings.from_dict(raw.get("headers")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible snake_case dict."""
        data = dataclasses.asdict(self)
        data["document"]["distribution"] = list(self.document.distribution)
        data["document"]["revisions"] = [dataclasses.asdict(r) for r in self.document.revisions]
        return data


def load_settings(path: Path) -> PrintSettings:
    """
    Load settings from a JSON file, falling back to defaults.

    Args:
        path: Settings file written by the export dialog

    Returns:
        PrintSettings (defaults for anything missing or malformed)
    """
    return PrintSettings.from_dict(load_json_payload(path))
