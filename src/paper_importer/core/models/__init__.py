"""
Core Models Package

Immutable data models shared by the resolver and the compliance engine.

All models in this package are frozen dataclasses. Imported JSON is
normalized into them once (see core.utils.serialization); nothing
downstream reads raw dicts.

| Model | Represents |
|-------|------------|
| `ExtractedMetadata` | Paper-level fields from the upload |
| `CatalogEntry` | One (region, program, provider, subject) row |
| `Question` / `Part` | Question tree: question → parts → subparts |
| `Alternative` / `Option` | Correct answers and MCQ options of a node |
"""

from .answers import Alternative, AnswerContext, Option, coerce_marks
from .catalog import CatalogEntry, NamedRef
from .metadata import ExtractedMetadata
from .parts import Part, PartKind
from .questions import Question

__all__ = [
    "Alternative",
    "AnswerContext",
    "Option",
    "coerce_marks",
    "CatalogEntry",
    "NamedRef",
    "ExtractedMetadata",
    "Part",
    "PartKind",
    "Question",
]
