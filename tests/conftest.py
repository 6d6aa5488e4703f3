import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import capdoc_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from capdoc_toolkit.core.models import CapabilitiesContent  # noqa: E402
from capdoc_toolkit.exporter.layout.config import LayoutConfig  # noqa: E402
from capdoc_toolkit.exporter.output.backend import ReportLabBackend  # noqa: E402


# Common test fixtures
@pytest.fixture
def layout_config():
    """A4 geometry with the default margins and footer reserve."""
    return LayoutConfig()


@pytest.fixture
def backend(layout_config):
    """Recording backend; draw calls are inspected through operations()."""
    return ReportLabBackend(layout_config.page_width, layout_config.page_height)


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple logo image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "logo.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def content_dict():
    """Small content tree in the camelCase shape the configuration UI stores."""
    return {
        "executiveSummary": {
            "title": "One Platform",
            "subtitle": "Every HR process",
            "description": "A unified platform for the complete employee lifecycle. " * 4,
            "stats": [
                {"value": "25", "label": "Modules"},
                {"value": "1,675+", "label": "Capabilities"},
            ],
            "valueProps": [{"title": "Unified", "description": "One data model across modules."}],
            "differentiators": ["Regional compliance built in", "AI assistance everywhere"],
        },
        "acts": [
            {
                "id": "act1",
                "title": "Act 1: Attract & Hire",
                "subtitle": "Finding the right people",
                "modules": [
                    {
                        "title": "Recruitment",
                        "badge": "ATS",
                        "tagline": "Hire faster",
                        "overview": "Requisitions, pipelines and offers in one place.",
                        "challenge": "Hiring is slow.",
                        "promise": "Hiring becomes fast.",
                        "keyOutcomes": [{"value": "40%", "label": "Faster hiring"}],
                        "personas": [{"persona": "Recruiter", "benefit": "Less admin work"}],
                        "categories": [
                            {"title": "Requisitions", "items": ["Approval flows", "Budget checks"]},
                            {"title": "Pipelines", "items": [f"Stage {i}" for i in range(8)]},
                        ],
                        "aiCapabilities": [{"type": "Screening", "description": "Ranks applicants"}],
                        "integrations": [{"module": "Onboarding", "description": "Hands over new hires"}],
                        "regionalAdvantage": {"regions": ["Caribbean"], "advantages": ["Local work permits"]},
                    },
                    {"title": "Onboarding", "overview": "First-day readiness."},
                ],
            },
            {
                "id": "act2",
                "title": "Act 2: Grow",
                "modules": [{"title": "Learning", "regionalNote": "CPD tracking"}],
            },
        ],
        "platformFeatures": [{"title": "Security", "features": ["Row-level security", "SSO"]}],
        "regions": [{"name": "Caribbean", "countries": ["Jamaica", "Trinidad"], "highlights": ["NIS", "NHT"]}],
        "aiIntelligence": [{"title": "Predictive", "description": "Forecasts", "examples": ["Attrition risk"]}],
    }


@pytest.fixture
def sample_content(content_dict):
    return CapabilitiesContent.from_dict(content_dict)
