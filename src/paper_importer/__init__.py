"""Top-level package for the Past Paper Importer.

Provides subpackages:
- paper_importer.core – question tree models, schemas, ingestion
- paper_importer.common – text matching, mapping tables, thresholds, file locking
- paper_importer.resolver – metadata extraction and catalog matching
- paper_importer.compliance – extraction rule checks and answer validation
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text(encoding="utf-8")
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("past-paper-importer")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
