"""
Past Paper Importer Core Package

Shared data models, schema checks and ingestion used by the resolver and
the compliance engine.

**Design notes:**

1. **Immutable Data Models**
   - Frozen dataclasses; an edit (reviewer change, answer save) creates a
     new instance.

2. **Normalize Once**
   - Uploads disagree on field names. `core.utils.serialization` maps every
     variant onto one model at load time.

3. **Marks Stay Exact**
   - Integral marks are ints, fractional marks floats; sums are compared
     with `==`.
"""

from .models import Alternative, CatalogEntry, ExtractedMetadata, Option, Part, PartKind, Question

__all__ = [
    "Alternative",
    "CatalogEntry",
    "ExtractedMetadata",
    "Option",
    "Part",
    "PartKind",
    "Question",
]
