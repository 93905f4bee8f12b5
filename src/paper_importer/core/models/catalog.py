"""
Module: catalog

Purpose:
    Provides CatalogEntry - one active data structure row of the academic
    database: a (region, program, provider, subject) combination that an
    imported paper can be attached to. Rows are read-only.

Key Functions:
    - CatalogEntry.from_dict(): Accepts the canonical shape and the
      relational-store export shape (regions/programs/providers/edu_subjects)

Dependencies:
    - dataclasses (std)

Used By:
    - resolver.catalog (loading)
    - resolver.matcher (scoring)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

# Canonical key -> export key used by the relational store joins
_ALIASES: Dict[str, str] = {
    "region": "regions",
    "program": "programs",
    "provider": "providers",
    "subject": "edu_subjects",
}


@dataclass(frozen=True, slots=True)
class NamedRef:
    """Id/name/code triple for a referenced catalog entity."""

    id: str
    name: str = ""
    code: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> NamedRef:
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object with id and name, got {data!r}")
        if data.get("id") in (None, ""):
            raise ValueError(f"Reference is missing an id: {data!r}")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            code=str(data.get("code") or ""),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "code": self.code}


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """
    Data structure row (immutable).

    Attributes:
        id: Data structure id
        region: Region reference
        program: Program reference (e.g. "IGCSE")
        provider: Provider reference (e.g. "Cambridge International (CIE)")
        subject: Subject reference; code holds the syllabus code
        status: Row status, "active" for selectable rows

    Example:
        >>> entry = CatalogEntry.from_dict({
        ...     "id": "ds-1",
        ...     "region": {"id": "r1", "name": "International"},
        ...     "program": {"id": "p1", "name": "IGCSE"},
        ...     "provider": {"id": "v1", "name": "Cambridge International (CIE)"},
        ...     "subject": {"id": "s1", "name": "Physics", "code": "0625"},
        ... })
        >>> entry.subject.code
        '0625'
    """

    id: str
    region: NamedRef
    program: NamedRef
    provider: NamedRef
    subject: NamedRef
    status: str = "active"

    @classmethod
    def from_dict(cls, data: dict) -> CatalogEntry:
        """
        Deserialize from either row shape.

        Raises:
            ValueError: If the id or a reference is missing
        """
        if data.get("id") in (None, ""):
            raise ValueError("Catalog entry is missing an id")

        refs = {}
        for key, alias in _ALIASES.items():
            raw = data.get(key, data.get(alias))
            refs[key] = NamedRef.from_dict(raw)

        return cls(
            id=str(data["id"]),
            status=str(data.get("status") or "active"),
            **refs,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status,
            "region": self.region.to_dict(),
            "program": self.program.to_dict(),
            "provider": self.provider.to_dict(),
            "subject": self.subject.to_dict(),
        }
