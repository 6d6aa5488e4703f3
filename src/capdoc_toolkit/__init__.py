"""Top-level package for the capabilities document toolkit.

Provides subpackages:
- capdoc_toolkit.core – content models and serialization helpers
- capdoc_toolkit.exporter – pagination, two-pass ToC, decorations, PDF output
- capdoc_toolkit.utils – logging helpers for UI consoles
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            for line in pyproject.read_text().splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("capdoc-toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
