"""
Utils Package

Ingestion of uploaded paper files into core models.
"""

from .serialization import (
    PaperImport,
    deserialize_paper,
    deserialize_question,
    load_paper,
    serialize_question,
)

__all__ = [
    "PaperImport",
    "deserialize_paper",
    "deserialize_question",
    "load_paper",
    "serialize_question",
]
