"""
Core Models Package

Immutable content models handed to the exporter. All models are frozen
dataclasses built with ``from_dict`` so JSON content from the configuration
UI (camelCase) and Python callers (snake_case) load the same way.
"""

from .content import (
    AICapability,
    AIIntelligenceArea,
    Act,
    CapabilitiesContent,
    Category,
    DEFAULT_GLOSSARY,
    ExecutiveSummary,
    FeatureCategory,
    GlossaryTerm,
    Integration,
    KeyOutcome,
    Module,
    Persona,
    Region,
    RegionalAdvantage,
    Stat,
    ValueProposition,
    load_content,
)

__all__ = [
    "AICapability",
    "AIIntelligenceArea",
    "Act",
    "CapabilitiesContent",
    "Category",
    "DEFAULT_GLOSSARY",
    "ExecutiveSummary",
    "FeatureCategory",
    "GlossaryTerm",
    "Integration",
    "KeyOutcome",
    "Module",
    "Persona",
    "Region",
    "RegionalAdvantage",
    "Stat",
    "ValueProposition",
    "load_content",
]
