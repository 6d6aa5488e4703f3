"""
Module: exporter.sections

Purpose:
    Turn settings and business content into blocks pushed through the
    layout cursor, one method per document section. Section methods never
    address pages directly: they start sections with new_page(), keep rows
    together with ensure_space() and let push() break pages as content
    flows.

Key Classes:
    - SectionAssembler: Per-section block assembly

Key Functions:
    - act_color(): Accent colour for an act id
    - estimate_toc_entries(): Upper bound on ToC rows before assembly

Dependencies:
    - exporter.layout: Cursor and block constructors
    - core.models: CapabilitiesContent
    - exporter.settings: PrintSettings

Used By:
    - exporter.controller: Generation pass
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from capdoc_toolkit.core.models import Act, CapabilitiesContent, Module
from capdoc_toolkit.exporter.layout.blocks import (
    AI_PALETTE,
    CHALLENGE_PALETTE,
    INTEGRATION_PALETTE,
    PROMISE_PALETTE,
    REGIONAL_PALETTE,
    TEXT_COLORS,
    WHITE,
    badge_row_block,
    banner_block,
    bullet_list_blocks,
    card_row_block,
    category_columns_block,
    definition_block,
    heading_block,
    key_value_block,
    labeled_box_block,
    module_header_block,
    outcome_row_block,
    paragraph_block,
    paragraph_blocks,
    persona_row_block,
    rule_block,
    stat_boxes_block,
    table_row_block,
    text_block,
    text_columns_block,
    truncate,
)
from capdoc_toolkit.exporter.layout.cursor import LayoutCursor
from capdoc_toolkit.exporter.layout.models import Block
from capdoc_toolkit.exporter.settings import PrintSettings

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

ACT_COLORS: dict[str, RGB] = {
    "prologue": (100, 116, 139),
    "act1": (59, 130, 246),
    "act2": (16, 185, 129),
    "act3": (245, 158, 11),
    "act4": (168, 85, 247),
    "act5": (239, 68, 68),
    "epilogue": (99, 102, 241),
}
DEFAULT_ACT_COLOR: RGB = (100, 116, 139)

REGIONAL_BANNER: RGB = (59, 130, 246)
AI_BANNER: RGB = (168, 85, 247)

# Space kept free for a module's opening blocks when modules share pages
MODULE_MIN_SPACE = 100.0

REVISION_COLUMNS = (3.0, 30.0, 65.0, 100.0)

LEGAL_TRADEMARKS = (
    "Intelli HRM and the Intelli HRM logo are trademarks. All other trademarks "
    "mentioned are the property of their respective owners."
)
LEGAL_CONFIDENTIALITY = (
    "This document contains proprietary information. Unauthorized reproduction, "
    "distribution, or disclosure is strictly prohibited."
)

# Level-1 sections recorded outside the act loop
_FIXED_TOC_SECTIONS = {
    "include_executive_overview": 1,
    "include_platform_at_glance": 1,
    "include_cross_cutting": 3,
    "include_glossary": 1,
    "include_quick_reference": 1,
}


def act_color(act_id: str) -> RGB:
    return ACT_COLORS.get(act_id, DEFAULT_ACT_COLOR)


def estimate_toc_entries(settings: PrintSettings, content: CapabilitiesContent) -> int:
    """
    Upper bound on the rows the table of contents will list.

    Computed before assembly so the ToC pages can be reserved in place.
    """
    sections = settings.sections
    depth = sections.toc_depth
    count = sum(n for flag, n in _FIXED_TOC_SECTIONS.items() if getattr(sections, flag))
    if sections.include_module_details:
        if sections.include_act_dividers:
            count += len(content.acts)
        if depth >= 2:
            count += content.module_count
    return count


def _capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


class SectionAssembler:
    """
    Assembles document sections onto a layout cursor.

    Args:
        cursor: Layout cursor shared with the ToC pass
        settings: Print settings
        content: Business content
        today: Date printed on the cover and the control page

    Example:
        >>> assembler = SectionAssembler(layout, PrintSettings(), content, date.today())
        >>> assembler.executive_overview()
        >>> layout.registry.entries[0].title
        'Executive Overview'
    """

    def __init__(
        self,
        cursor: LayoutCursor,
        settings: PrintSettings,
        content: CapabilitiesContent,
        today: date,
    ) -> None:
        self.cursor = cursor
        self.settings = settings
        self.content = content
        self.today = today
        self.config = cursor.config
        self.primary = settings.branding.primary_rgb
        self.secondary = settings.branding.secondary_rgb
        self.accent = settings.branding.accent_rgb

    def accent_for(self, act: Act) -> RGB:
        if not self.settings.branding.use_act_colors:
            return self.primary
        return act_color(act.id)

    def _fixed(self, draw, label: str) -> None:
        self.cursor.place_fixed(Block(draw=draw, height=0.0, label=label))

    # ─────────────────────────────────────────────────────────────────────
    # Front matter
    # ─────────────────────────────────────────────────────────────────────

    def cover(self) -> None:
        """Cover page in the configured style; always page index 0."""
        self.cursor.new_page("Cover")
        style = self.settings.document.cover_style
        draw = {
            "corporate": self._draw_corporate_cover,
            "minimal": self._draw_minimal_cover,
        }.get(style, self._draw_branded_cover)
        self._fixed(draw, f"cover:{style}")

    def _draw_branded_cover(self, backend, x, y, width) -> None:
        config, document = self.config, self.settings.document
        center, height = config.center_x, config.page_height
        backend.rect(0, 0, width, height, fill=self.primary)
        backend.text(document.title, center, 80, size=36, style="bold", color=WHITE, align="center")
        backend.text(document.subtitle, center, 95, size=18, color=WHITE, align="center")

        stats = self.content.executive_summary.stats
        if stats:
            step = min(45.0, width / len(stats))
            start = center - step * (len(stats) - 1) / 2
            for i, stat in enumerate(stats):
                stat_x = start + i * step
                backend.text(stat.value, stat_x, 140, size=24, style="bold", color=WHITE, align="center")
                backend.text(stat.label, stat_x, 148, size=9, color=(200, 200, 200), align="center")

        backend.text(f"Version {document.version}", center, height - 40, size=10, color=(200, 200, 200), align="center")
        backend.text(self.today.strftime("%B %Y"), center, height - 32, size=10, color=(200, 200, 200), align="center")

        if document.classification != "customer":
            label = document.classification.upper()
            badge_width = backend.text_width(label, size=8) + 10
            backend.rect(center - badge_width / 2, height - 55, badge_width, 8, fill=self.secondary, radius=2)
            backend.text(label, center, height - 49.5, size=8, color=WHITE, align="center")

    def _draw_corporate_cover(self, backend, x, y, width) -> None:
        config, document = self.config, self.settings.document
        left, height = config.margin_left, config.page_height
        backend.rect(0, 0, width, 40, fill=self.secondary)
        backend.text(document.copyright_holder or "Intelli HRM", left, 25, size=14, style="bold", color=WHITE)
        backend.text(document.title, left, 80, size=32, style="bold", color=self.secondary)
        backend.text(document.subtitle, left, 95, size=16, color=TEXT_COLORS["muted"])
        backend.rect(0, height - 5, width, 5, fill=self.accent)
        backend.text(
            f"Version {document.version} | {self.today.strftime('%B %Y')}",
            left, height - 20, size=10, color=TEXT_COLORS["muted"],
        )

    def _draw_minimal_cover(self, backend, x, y, width) -> None:
        config, document = self.config, self.settings.document
        center = config.center_x
        backend.text(document.title, center, 100, size=32, style="bold", color=self.primary, align="center")
        backend.text(document.subtitle, center, 115, size=16, color=TEXT_COLORS["secondary"], align="center")
        backend.rect(center - 25, 130, 50, 2, fill=self.primary)
        backend.text(
            f"Version {document.version}", center, config.page_height - 30,
            size=10, color=TEXT_COLORS["secondary"], align="center",
        )

    def document_control(self) -> None:
        """Document information, dates, ownership and revision history."""
        document = self.settings.document
        section = "Document Control"
        push = self.cursor.push

        self.cursor.new_page(section)
        push(heading_block("Document Information", color=self.secondary, section=section))
        push(rule_block(section=section))

        def rows(pairs: Sequence[tuple[str, str]]) -> None:
            for label, value in pairs:
                push(key_value_block(label, value, section=section))

        def subheading(title: str) -> None:
            self.cursor.advance(10)
            push(heading_block(title, size=14, color=self.secondary, space_after=10, section=section))

        rows([
            ("Document Title:", document.title),
            ("Document ID:", document.document_id),
            ("Version:", document.version),
            ("Status:", _capitalize(document.status)),
            ("Classification:", _capitalize(document.classification)),
        ])
        subheading("Dates")
        rows([
            ("Effective Date:", document.effective_date or "N/A"),
            ("Next Review:", document.review_date or "N/A"),
            ("Last Updated:", self.today.isoformat()),
        ])
        subheading("Ownership")
        rows([
            ("Document Owner:", document.owner or "N/A"),
            ("Approved By:", document.approver or "N/A"),
            ("Distribution:", ", ".join(document.distribution) or "N/A"),
        ])

        if document.revisions:
            self.cursor.advance(5)
            subheading("Revision History")
            push(table_row_block(
                ("Version", "Date", "Author", "Description"), REVISION_COLUMNS,
                style="bold", color=TEXT_COLORS["muted"], fill=(249, 250, 251), height=10, section=section,
            ))
            for rev in document.revisions:
                push(table_row_block(
                    (rev.version, rev.date, rev.author, truncate(rev.changes, 60)), REVISION_COLUMNS,
                    section=section,
                ))

    def legal_notice(self) -> None:
        """Copyright, trademarks, confidentiality, disclaimer and outlook statements."""
        document = self.settings.document
        section = "Legal Notice"
        holder = document.copyright_holder or "Intelli HRM"

        self.cursor.new_page(section)
        self.cursor.push(heading_block(section, size=16, color=self.secondary, section=section))

        notices = (
            ("COPYRIGHT NOTICE", f"© {document.copyright_year} {holder}. All rights reserved."),
            ("TRADEMARKS", LEGAL_TRADEMARKS),
            ("CONFIDENTIALITY", LEGAL_CONFIDENTIALITY),
            ("DISCLAIMER", document.disclaimer_text),
            ("FORWARD-LOOKING STATEMENTS", document.forward_looking_text),
        )
        for title, text in notices:
            self.cursor.ensure_space(30, section)
            self.cursor.push(text_block(
                title, size=11, style="bold", color=TEXT_COLORS["muted"], height=7, section=section,
            ))
            self.cursor.push_all(paragraph_blocks(
                self.cursor.backend, text, self.config.content_width,
                size=9, color=TEXT_COLORS["muted"], space_after=10, section=section,
            ))

    # ─────────────────────────────────────────────────────────────────────
    # Overview sections
    # ─────────────────────────────────────────────────────────────────────

    def executive_overview(self) -> None:
        """Summary, headline stats, value propositions and differentiators."""
        summary = self.content.executive_summary
        section = "Executive Overview"
        push = self.cursor.push

        self.cursor.new_page(section)
        self.cursor.push_heading(
            heading_block(section, size=24, color=self.primary, section=section), section, 1,
        )
        if summary.title:
            push(text_block(summary.title, size=20, style="bold", color=self.secondary, height=8, section=section))
        if summary.subtitle:
            push(text_block(summary.subtitle, size=14, style="bold", color=self.primary, height=10, section=section))
        if summary.description:
            push(paragraph_block(summary.description, size=10, space_after=10, section=section))
        if summary.stats:
            push(stat_boxes_block([(s.value, s.label) for s in summary.stats], color=self.primary, section=section))

        if summary.value_props:
            push(heading_block("Value Proposition", size=14, color=self.secondary, space_after=10, section=section))
            for prop in summary.value_props:
                self.cursor.ensure_space(25, section)
                push(text_block(f"* {prop.title}", size=11, style="bold", indent=3, height=6, section=section))
                push(paragraph_block(prop.description, size=9, indent=8, space_after=5, section=section))
            self.cursor.advance(10)

        if summary.differentiators:
            push(heading_block("Key Differentiators", size=14, color=self.secondary, space_after=10, section=section))
            self.cursor.push_all(bullet_list_blocks(
                summary.differentiators, size=9, line_step=6, section=section,
            ))

    def platform_at_glance(self) -> None:
        """Four-column grid of module cards coloured by act."""
        section = "Platform at a Glance"
        self.cursor.new_page(section)
        self.cursor.push_heading(
            heading_block(section, size=20, color=self.secondary, section=section), section, 1,
        )
        self.cursor.push(text_block(
            f"{self.content.module_count} integrated modules across the complete employee lifecycle.",
            color=TEXT_COLORS["muted"], height=15, section=section,
        ))

        cards = [
            (module.title, module.badge, self.accent_for(act))
            for act in self.content.acts
            for module in act.modules
        ]
        for start in range(0, len(cards), 4):
            self.cursor.push(card_row_block(cards[start:start + 4], section=section))

    # ─────────────────────────────────────────────────────────────────────
    # Acts and modules
    # ─────────────────────────────────────────────────────────────────────

    def act(self, act: Act) -> None:
        """Optional act divider page followed by the act's module pages."""
        sections = self.settings.sections
        if sections.include_act_dividers:
            self.act_divider(act)
        for module in act.modules:
            self.module(module, act)

    def act_divider(self, act: Act) -> None:
        color = self.accent_for(act)
        section = act.title
        self.cursor.new_page(section)
        self.cursor.record_section(act.title, 1)
        self.cursor.place_fixed(banner_block(
            act.short_title, color,
            text_x=self.config.margin_left, height=60, title_size=28, title_y=42,
            kicker=act.label, kicker_y=25, section=section,
        ))
        self.cursor.move_to(70)
        if act.subtitle:
            self.cursor.push(text_block(
                act.subtitle, size=11, style="italic", color=TEXT_COLORS["light"], height=20, section=section,
            ))
        if act.modules:
            self.cursor.push(heading_block(
                "Modules in this Act:", size=12, color=self.secondary, space_after=10, section=section,
            ))
            self.cursor.push_all(bullet_list_blocks(
                [f"{m.title} ({m.badge})" if m.badge else m.title for m in act.modules],
                bullet="•", size=10, color=TEXT_COLORS["muted"], indent=5, line_step=7, section=section,
            ))

    def module(self, module: Module, act: Act) -> None:
        """One module: header, overview, callouts, outcomes, categories and boxes."""
        section = module.title
        color = self.accent_for(act)
        cursor = self.cursor
        push = cursor.push

        if self.settings.sections.module_starts_new_page:
            cursor.new_page(section)
        else:
            cursor.ensure_space(MODULE_MIN_SPACE, section)

        cursor.push_heading(
            module_header_block(module.title, module.badge, module.tagline, color, section=section),
            module.title, 2,
        )
        if module.overview:
            push(paragraph_block(module.overview, size=9, indent=5, space_after=5, section=section))

        if module.challenge and module.promise:
            cursor.ensure_space(50, section)
            push(labeled_box_block(
                "THE CHALLENGE", [f'"{module.challenge}"'], CHALLENGE_PALETTE,
                title_size=8, text_style="italic", line_step=4, max_lines=2, section=section,
            ))
            push(labeled_box_block(
                "THE PROMISE", [module.promise], PROMISE_PALETTE,
                title_size=8, line_step=4, max_lines=2, section=section,
            ))

        if module.key_outcomes:
            cursor.ensure_space(26, section)
            push(text_block("Key Outcomes", style="bold", height=6, section=section))
            push(outcome_row_block([(o.value, o.label) for o in module.key_outcomes], color=color, section=section))

        if module.personas:
            cursor.ensure_space(20, section)
            push(text_block("Who Benefits", style="bold", height=5, section=section))
            push(persona_row_block([(p.persona, p.benefit) for p in module.personas], section=section))

        categories = [(c.title, c.items) for c in module.categories]
        for i in range(0, len(categories), 2):
            right = categories[i + 1] if i + 1 < len(categories) else None
            push(category_columns_block(categories[i], right, section=section))
        if categories:
            cursor.advance(5)

        if module.ai_capabilities:
            push(labeled_box_block(
                "AI-Powered Intelligence",
                [(f"{ai.type}:", truncate(ai.description, 70)) for ai in module.ai_capabilities[:4]],
                AI_PALETTE, section=section,
            ))

        if module.integrations:
            push(labeled_box_block(
                "Cross-Module Integration",
                [(i.module, f"- {truncate(i.description, 60)}") for i in module.integrations[:4]],
                INTEGRATION_PALETTE, section=section,
            ))

        advantage = module.regional_advantage
        if advantage is not None and advantage.advantages:
            push(labeled_box_block(
                "Regional Advantage",
                [f"- {truncate(a, 80)}" for a in advantage.advantages[:4]],
                REGIONAL_PALETTE, title_size=9, text_size=7, line_step=4, max_lines=1,
                badges=advantage.regions, section=section,
            ))
        elif module.regional_note:
            push(labeled_box_block(
                f"Regional Compliance: {module.regional_note}", [], REGIONAL_PALETTE,
                title_size=8, space_after=6, section=section,
            ))

        cursor.advance(10)

    # ─────────────────────────────────────────────────────────────────────
    # Cross-cutting and back matter
    # ─────────────────────────────────────────────────────────────────────

    def _banner_page(self, title: str, color: RGB) -> None:
        self.cursor.new_page(title)
        self.cursor.record_section(title, 1)
        self.cursor.place_fixed(banner_block(title, color, text_x=self.config.margin_left, section=title))
        self.cursor.move_to(50)

    def cross_cutting(self) -> None:
        """Platform features, regional compliance and AI intelligence."""
        push, push_all = self.cursor.push, self.cursor.push_all

        section = "Platform Features"
        self._banner_page(section, self.accent)
        for category in self.content.platform_features:
            self.cursor.ensure_space(35, section)
            push(text_block(category.title, size=12, style="bold", height=6, section=section))
            push_all(bullet_list_blocks(category.features, bullet="  *", section=section))
            self.cursor.advance(6)

        section = "Regional Compliance"
        self._banner_page(section, REGIONAL_BANNER)
        for region in self.content.regions:
            self.cursor.ensure_space(45, section)
            push(text_block(region.name, size=14, style="bold", height=6, section=section))
            if region.countries:
                push(badge_row_block(region.countries, fill=REGIONAL_BANNER, space_after=4, section=section))
            push_all(bullet_list_blocks(region.highlights, bullet="  *", section=section))
            self.cursor.advance(10)

        section = "AI Intelligence"
        self._banner_page(section, AI_BANNER)
        for area in self.content.ai_intelligence:
            self.cursor.ensure_space(40, section)
            push(text_block(area.title, size=12, style="bold", height=6, section=section))
            if area.description:
                push(paragraph_block(
                    area.description, size=9, style="italic", color=TEXT_COLORS["muted"],
                    space_after=2, section=section,
                ))
            push_all(bullet_list_blocks(area.examples, bullet="  *", section=section))
            self.cursor.advance(8)

    def glossary(self) -> None:
        section = "Glossary"
        self.cursor.new_page(section)
        self.cursor.push_heading(
            heading_block("Glossary of Terms", color=self.secondary, section=section), "Glossary of Terms", 1,
        )
        for item in self.content.glossary:
            self.cursor.push(definition_block(item.term, item.definition, section=section))

    def quick_reference(self) -> None:
        """Framed single-page summary: module list, key stats and contact line."""
        config = self.config
        section = "Quick Reference"
        push = self.cursor.push

        self.cursor.new_page(section)

        def frame(backend, x, y, width) -> None:
            backend.rect(
                config.margin_left - 5, config.margin_top - 5,
                config.content_width + 10, config.page_height - config.margin_top - config.margin_bottom + 10,
                stroke=self.primary, line_width=1,
            )

        self._fixed(frame, "quick-reference-frame")
        self.cursor.push_heading(
            heading_block(
                "INTELLI HRM QUICK REFERENCE", size=16, color=self.primary,
                align="center", space_after=20, section=section,
            ),
            "Quick Reference Card", 1,
        )

        titles = [module.title for module in self.content.all_modules]
        for start in range(0, len(titles), 4):
            push(text_columns_block(titles[start:start + 4], section=section))

        stats = self.content.executive_summary.stats
        if stats:
            self.cursor.advance(15)
            push(heading_block("KEY STATISTICS", size=12, color=self.secondary, space_after=10, section=section))
            for stat in stats:
                push(key_value_block(
                    stat.value, stat.label,
                    label_offset=5, value_offset=35,
                    label_color=self.primary, value_color=TEXT_COLORS["secondary"], section=section,
                ))

        contact_y = config.body_bottom - 8
        if self.cursor.y < contact_y:
            self.cursor.move_to(contact_y)
        push(text_block(
            self.content.contact_line, size=9, color=TEXT_COLORS["muted"],
            align="center", height=8, section=section,
        ))

    def blank_page(self) -> None:
        """Single empty page for documents with every section disabled."""
        self.cursor.new_page("")
