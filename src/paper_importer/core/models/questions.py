"""
Module: questions

Purpose:
    Provides the Question dataclass - one imported question with its
    identifying metadata and its node tree. This is the unit the
    compliance engine reports on.

Key Functions:
    - Question.all_parts: Flat list of nodes in tree order
    - Question.get_part(label): Find a node by label
    - Question.to_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - functools (std)
    - .parts.Part

Used By:
    - core.utils.serialization
    - compliance.engine
    - cli
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Optional

from .answers import MarkValue
from .parts import Part, PartKind


@dataclass(frozen=True)
class Question:
    """
    Imported question (immutable).

    Attributes:
        id: Identifier from the uploaded file, or "q{n}" when absent
        question_number: Display number like "1" (report key)
        question_node: Root node of kind QUESTION
        topic: Topic name from the source JSON
        subtopic: Sub-topic name from the source JSON
        unit: Unit/chapter name from the source JSON

    Example:
        >>> node = Part("1", PartKind.QUESTION, marks=5)
        >>> q = Question(id="q1", question_number="1", question_node=node)
        >>> q.marks
        5
    """

    id: str
    question_number: str
    question_node: Part
    topic: str = ""
    subtopic: str = ""
    unit: str = ""

    def __post_init__(self) -> None:
        if self.question_node.kind != PartKind.QUESTION:
            raise ValueError(
                f"question_node must be a QUESTION node: {self.question_node.kind}"
            )
        if not self.question_number:
            raise ValueError("question_number must be non-empty")

    @property
    def marks(self) -> MarkValue:
        """Declared marks of the question node."""
        return self.question_node.marks

    @property
    def text(self) -> str:
        return self.question_node.text

    @cached_property
    def all_parts(self) -> list[Part]:
        """
        Get flat list of all nodes in tree order.

        Returns:
            List including question_node and all descendants
        """
        return list(self.question_node.iter_all())

    def get_part(self, label: str) -> Optional[Part]:
        """
        Find a node by label.

        Args:
            label: Node label like "1(a)(ii)"

        Returns:
            Matching Part or None
        """
        return self.question_node.find(label)

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        d = {
            "id": self.id,
            "question_number": self.question_number,
            "topic": self.topic,
            "subtopic": self.subtopic,
        }
        if self.unit:
            d["unit"] = self.unit
        d.update(self.question_node.to_dict())
        return d

    def __repr__(self) -> str:
        return (
            f"Question({self.id!r}, number={self.question_number!r}, "
            f"marks={self.marks}, parts={len(self.question_node.children)})"
        )
