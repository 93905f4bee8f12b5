"""Exception hierarchy for the importer's I/O boundaries."""

from __future__ import annotations


class ImporterError(RuntimeError):
    """Base class for failures reading inputs or writing outputs."""


class PaperLoadError(ImporterError):
    """Raised when an uploaded paper file cannot be read or parsed."""


class CatalogLoadError(ImporterError):
    """Raised when the data-structure catalog cannot be read or parsed."""


class ConfigLoadError(ImporterError):
    """Raised when an extraction rules config file cannot be read."""
