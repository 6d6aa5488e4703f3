"""
Module: content

Purpose:
    Business content rendered into the capabilities document: executive
    summary, acts and their modules, cross-cutting capabilities and the
    glossary. Content is external data handed to the exporter; nothing in
    this module knows about pages or coordinates.

Key Classes:
    - CapabilitiesContent: Root of the content tree
    - Act / Module: Chapter structure of the module pages
    - GlossaryTerm: Back-matter glossary entry

Key Functions:
    - load_content(): Read content from a JSON file

Dependencies:
    - dataclasses (std)
    - core.utils.serialization: camelCase-aware dict access

Used By:
    - exporter.sections: Section assembly
    - exporter.controller: generate() entry point
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..utils.serialization import load_json_payload, normalize_keys


def _text(data: dict[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    return default if value is None else str(value)


def _strings(data: dict[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key) or ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


def _items(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = data.get(key) or ()
    return [normalize_keys(item) for item in value if isinstance(item, dict)]


# ─────────────────────────────────────────────────────────────────────────────
# Executive Summary
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class Stat:
    """Headline figure such as ("25", "Modules")."""

    value: str
    label: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Stat:
        data = normalize_keys(data)
        return cls(value=_text(data, "value"), label=_text(data, "label"))


@dataclass(frozen=True, slots=True)
class ValueProposition:
    title: str
    description: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValueProposition:
        data = normalize_keys(data)
        return cls(title=_text(data, "title"), description=_text(data, "description"))


@dataclass(frozen=True, slots=True)
class ExecutiveSummary:
    """
    Opening summary of the platform.

    Attributes:
        title: Summary headline
        subtitle: Secondary headline
        description: Free paragraph, wrapped to content width
        stats: Headline figures (cover page and stat boxes)
        value_props: Titled value propositions
        differentiators: Short bullet statements
    """

    title: str = ""
    subtitle: str = ""
    description: str = ""
    stats: tuple[Stat, ...] = ()
    value_props: tuple[ValueProposition, ...] = ()
    differentiators: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExecutiveSummary:
        data = normalize_keys(data)
        return cls(
            title=_text(data, "title"),
            subtitle=_text(data, "subtitle"),
            description=_text(data, "description"),
            stats=tuple(Stat.from_dict(s) for s in _items(data, "stats")),
            value_props=tuple(ValueProposition.from_dict(v) for v in _items(data, "value_props")),
            differentiators=_strings(data, "differentiators"),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Modules
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class Category:
    title: str
    items: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        data = normalize_keys(data)
        return cls(title=_text(data, "title"), items=_strings(data, "items"))


@dataclass(frozen=True, slots=True)
class AICapability:
    type: str
    description: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AICapability:
        data = normalize_keys(data)
        return cls(type=_text(data, "type"), description=_text(data, "description"))


@dataclass(frozen=True, slots=True)
class Integration:
    module: str
    description: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Integration:
        data = normalize_keys(data)
        return cls(module=_text(data, "module"), description=_text(data, "description"))


@dataclass(frozen=True, slots=True)
class KeyOutcome:
    value: str
    label: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KeyOutcome:
        data = normalize_keys(data)
        return cls(value=_text(data, "value"), label=_text(data, "label"))


@dataclass(frozen=True, slots=True)
class Persona:
    persona: str
    benefit: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Persona:
        data = normalize_keys(data)
        return cls(persona=_text(data, "persona"), benefit=_text(data, "benefit"))


@dataclass(frozen=True, slots=True)
class RegionalAdvantage:
    regions: tuple[str, ...] = ()
    advantages: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegionalAdvantage:
        data = normalize_keys(data)
        return cls(regions=_strings(data, "regions"), advantages=_strings(data, "advantages"))


@dataclass(frozen=True, slots=True)
class Module:
    """
    One product module rendered as a module section.

    Optional blocks (challenge/promise, outcomes, personas, AI, integrations,
    regional advantage) are skipped when empty.
    """

    title: str
    badge: str = ""
    tagline: str = ""
    overview: str = ""
    challenge: str = ""
    promise: str = ""
    key_outcomes: tuple[KeyOutcome, ...] = ()
    personas: tuple[Persona, ...] = ()
    categories: tuple[Category, ...] = ()
    ai_capabilities: tuple[AICapability, ...] = ()
    integrations: tuple[Integration, ...] = ()
    regional_advantage: Optional[RegionalAdvantage] = None
    regional_note: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Module:
        data = normalize_keys(data)
        advantage = data.get("regional_advantage")
        return cls(
            title=_text(data, "title"),
            badge=_text(data, "badge"),
            tagline=_text(data, "tagline"),
            overview=_text(data, "overview"),
            challenge=_text(data, "challenge"),
            promise=_text(data, "promise"),
            key_outcomes=tuple(KeyOutcome.from_dict(o) for o in _items(data, "key_outcomes")),
            personas=tuple(Persona.from_dict(p) for p in _items(data, "personas")),
            categories=tuple(Category.from_dict(c) for c in _items(data, "categories")),
            ai_capabilities=tuple(AICapability.from_dict(a) for a in _items(data, "ai_capabilities")),
            integrations=tuple(Integration.from_dict(i) for i in _items(data, "integrations")),
            regional_advantage=RegionalAdvantage.from_dict(advantage) if isinstance(advantage, dict) else None,
            regional_note=_text(data, "regional_note"),
        )


@dataclass(frozen=True, slots=True)
class Act:
    """
    Chapter grouping modules.

    ``id`` selects the accent colour ("prologue", "act1" ... "epilogue").
    """

    id: str
    title: str
    subtitle: str = ""
    modules: tuple[Module, ...] = ()

    @property
    def label(self) -> str:
        """Divider label: PROLOGUE, ACT 1 ... EPILOGUE."""
        if self.id in ("prologue", "epilogue"):
            return self.id.upper()
        return self.id.replace("act", "ACT ").upper()

    @property
    def short_title(self) -> str:
        """Title after the first colon ("Act 1: Hire" -> "Hire")."""
        _, sep, rest = self.title.partition(":")
        return rest.strip() if sep and rest.strip() else self.title

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Act:
        data = normalize_keys(data)
        return cls(
            id=_text(data, "id"),
            title=_text(data, "title"),
            subtitle=_text(data, "subtitle"),
            modules=tuple(Module.from_dict(m) for m in _items(data, "modules")),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Cross-cutting capabilities and back matter
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class FeatureCategory:
    title: str
    features: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeatureCategory:
        data = normalize_keys(data)
        return cls(title=_text(data, "title"), features=_strings(data, "features"))


@dataclass(frozen=True, slots=True)
class Region:
    name: str
    countries: tuple[str, ...] = ()
    highlights: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Region:
        data = normalize_keys(data)
        return cls(
            name=_text(data, "name"),
            countries=_strings(data, "countries"),
            highlights=_strings(data, "highlights"),
        )


@dataclass(frozen=True, slots=True)
class AIIntelligenceArea:
    title: str
    description: str = ""
    examples: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AIIntelligenceArea:
        data = normalize_keys(data)
        return cls(
            title=_text(data, "title"),
            description=_text(data, "description"),
            examples=_strings(data, "examples"),
        )


@dataclass(frozen=True, slots=True)
class GlossaryTerm:
    term: str
    definition: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GlossaryTerm:
        data = normalize_keys(data)
        return cls(term=_text(data, "term"), definition=_text(data, "definition"))


DEFAULT_GLOSSARY: tuple[GlossaryTerm, ...] = (
    GlossaryTerm("ESS", "Employee Self-Service - Portal for employees to manage their own HR data"),
    GlossaryTerm("MSS", "Manager Self-Service - Tools for managers to oversee their teams"),
    GlossaryTerm("LMS", "Learning Management System - Platform for training delivery and tracking"),
    GlossaryTerm("RLS", "Row-Level Security - Database security restricting data access per user"),
    GlossaryTerm("Compa-Ratio", "Comparison ratio of employee salary to market midpoint"),
    GlossaryTerm("9-Box Grid", "Performance/potential matrix for talent assessment and succession planning"),
    GlossaryTerm("PAYE", "Pay As You Earn - Tax withholding system used in Caribbean/UK"),
    GlossaryTerm("NIS", "National Insurance Scheme - Social security contributions"),
    GlossaryTerm("NHT", "National Housing Trust - Jamaica housing contribution scheme"),
    GlossaryTerm("SSNIT", "Social Security and National Insurance Trust - Ghana pension system"),
    GlossaryTerm("AFP", "Administradoras de Fondos de Pensiones - Dominican Republic pension funds"),
    GlossaryTerm("IDP", "Individual Development Plan - Personalized employee growth roadmap"),
    GlossaryTerm("PIP", "Performance Improvement Plan - Structured plan to address performance gaps"),
    GlossaryTerm("CFDI", "Comprobante Fiscal Digital por Internet - Mexico electronic invoice"),
    GlossaryTerm("OKR", "Objectives and Key Results - Goal-setting framework"),
)


DEFAULT_CONTACT_LINE = "For more information: docs.intellihrm.com"


@dataclass(frozen=True, slots=True)
class CapabilitiesContent:
    """
    Root of the business content tree.

    Attributes:
        executive_summary: Opening summary and headline stats
        acts: Ordered chapters of modules
        platform_features: Cross-cutting platform feature groups
        regions: Regional compliance coverage
        ai_intelligence: Cross-cutting AI capability areas
        glossary: Back-matter glossary (defaults to the HRMS glossary)
        contact_line: Closing line of the quick reference card

    Example:
        >>> content = CapabilitiesContent.from_dict({"acts": []})
        >>> content.module_count
        0
    """

    executive_summary: ExecutiveSummary = field(default_factory=ExecutiveSummary)
    acts: tuple[Act, ...] = ()
    platform_features: tuple[FeatureCategory, ...] = ()
    regions: tuple[Region, ...] = ()
    ai_intelligence: tuple[AIIntelligenceArea, ...] = ()
    glossary: tuple[GlossaryTerm, ...] = DEFAULT_GLOSSARY
    contact_line: str = DEFAULT_CONTACT_LINE

    @property
    def module_count(self) -> int:
        return sum(len(act.modules) for act in self.acts)

    @property
    def all_modules(self) -> list[Module]:
        return [module for act in self.acts for module in act.modules]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CapabilitiesContent:
        data = normalize_keys(data)
        glossary = tuple(GlossaryTerm.from_dict(g) for g in _items(data, "glossary"))
        summary = data.get("executive_summary")
        return cls(
            executive_summary=ExecutiveSummary.from_dict(summary) if isinstance(summary, dict) else ExecutiveSummary(),
            acts=tuple(Act.from_dict(a) for a in _items(data, "acts")),
            platform_features=tuple(FeatureCategory.from_dict(f) for f in _items(data, "platform_features")),
            regions=tuple(Region.from_dict(r) for r in _items(data, "regions")),
            ai_intelligence=tuple(AIIntelligenceArea.from_dict(a) for a in _items(data, "ai_intelligence")),
            glossary=glossary or DEFAULT_GLOSSARY,
            contact_line=_text(data, "contact_line", DEFAULT_CONTACT_LINE),
        )


def load_content(path: Path) -> CapabilitiesContent:
    """
    Load content from a JSON file.

    Missing or malformed files produce empty content with the default
    glossary rather than an error.
    """
    return CapabilitiesContent.from_dict(load_json_payload(path))
