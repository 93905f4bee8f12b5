"""
Module: parts

Purpose:
    Provides the Part dataclass - an immutable tree node representing
    imported question structure. Each Part is a question (root), a part
    (a) or a subpart (i). Every node carries its own marks, answer data,
    options and attachments.

Key Functions:
    - Part.iter_all(): Iterate over all nodes in tree order
    - Part.find(label): Find a node by label
    - Part.alternative_marks: Sum of this node's alternative marks
    - Part.has_attachments_in_subtree: Any attachment on node or descendants
    - Part.to_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .answers

Used By:
    - core.models.questions.Question
    - core.utils.serialization
    - compliance (rules, engine, answer_structure)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from .answers import Alternative, AlternativeId, MarkValue, Option


class PartKind(str, Enum):
    """Type of question node."""
    QUESTION = "question"  # Top-level question (e.g., "1")
    PART = "part"          # Letter part (e.g., "1(a)")
    SUBPART = "subpart"    # Roman numeral subpart (e.g., "1(a)(ii)")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Part:
    """
    Question node (immutable tree structure).

    The tree structure is:
        Question ("1")
        ├── Part ("1(a)")
        │   ├── Subpart ("1(a)(i)")
        │   └── Subpart ("1(a)(ii)")
        └── Part ("1(b)")

    Attributes:
        label: Display label like "1", "1(a)", "1(a)(ii)"
        kind: QUESTION, PART or SUBPART
        marks: Declared marks for this node
        question_type: "mcq", "tf", "descriptive", "calculation", ...
        text: Question text (question_description in imported JSON)
        answer_format: Expected answer layout, e.g. "single_line"
        answer_requirement: Free-text requirement, e.g. "any two from"
        correct_answers: Creditable alternatives for this node
        options: MCQ options
        attachments: Attachment references (file names / storage keys)
        hint: Learning hint
        explanation: Worked explanation
        figure: Source flagged the node as needing a figure
        figure_required: Explicit reviewer toggle (None = not set)
        children: Child nodes

    Invariants:
        - QUESTION nodes have only PART children
        - PART nodes have only SUBPART children
        - SUBPART nodes are leaves

    Example:
        >>> sub = Part("1(a)(i)", PartKind.SUBPART, marks=2)
        >>> part = Part("1(a)", PartKind.PART, marks=2, children=(sub,))
        >>> part.is_leaf
        False
    """

    label: str
    kind: PartKind
    marks: MarkValue = 0
    question_type: str = ""
    text: str = ""
    answer_format: str = ""
    answer_requirement: str = ""
    correct_answers: Tuple[Alternative, ...] = ()
    options: Tuple[Option, ...] = ()
    attachments: Tuple[str, ...] = ()
    hint: str = ""
    explanation: str = ""
    figure: bool = False
    figure_required: Optional[bool] = None
    children: Tuple[Part, ...] = ()

    def __post_init__(self) -> None:
        """Validate tree shape on construction."""
        expected = {
            PartKind.QUESTION: PartKind.PART,
            PartKind.PART: PartKind.SUBPART,
        }.get(self.kind)
        for child in self.children:
            if expected is None:
                raise ValueError(f"Subpart {self.label} cannot have children")
            if child.kind != expected:
                raise ValueError(
                    f"Children of {self.kind} {self.label} must be {expected}, "
                    f"got {child.kind} {child.label}"
                )

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_leaf(self) -> bool:
        """Check if this node has no children."""
        return len(self.children) == 0

    @property
    def depth(self) -> int:
        """Depth in the tree (question=0, part=1, subpart=2)."""
        if self.kind == PartKind.QUESTION:
            return 0
        elif self.kind == PartKind.PART:
            return 1
        return 2

    @property
    def alternative_ids(self) -> Tuple[AlternativeId, ...]:
        """Alternative ids in list order (duplicates kept)."""
        return tuple(alt.alternative_id for alt in self.correct_answers)

    @property
    def alternative_marks(self) -> MarkValue:
        """Sum of marks across this node's alternatives."""
        return sum(alt.marks for alt in self.correct_answers)

    @property
    def has_attachments_in_subtree(self) -> bool:
        """True if this node or any descendant has an attachment."""
        return any(node.attachments for node in self.iter_all())

    # ─────────────────────────────────────────────────────────────────────────
    # Iteration / Query
    # ─────────────────────────────────────────────────────────────────────────

    def iter_all(self) -> Iterator[Part]:
        """
        Iterate over this node and all descendants (pre-order).

        Yields:
            This node, then all descendants in tree order
        """
        yield self
        for child in self.children:
            yield from child.iter_all()

    def find(self, label: str) -> Optional[Part]:
        """
        Find a node by label in this subtree.

        Args:
            label: Node label to search for

        Returns:
            Matching Part or None if not found
        """
        if self.label == label:
            return self
        for child in self.children:
            found = child.find(label)
            if found is not None:
                return found
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to dictionary using the imported JSON field names.

        Returns:
            Dict representation
        """
        d = {
            "label": self.label,
            "kind": self.kind.value,
            "marks": self.marks,
            "type": self.question_type,
            "question_description": self.text,
            "answer_format": self.answer_format,
            "correct_answers": [alt.to_dict() for alt in self.correct_answers],
            "options": [opt.to_dict() for opt in self.options],
            "attachments": list(self.attachments),
            "figure": self.figure,
        }
        if self.answer_requirement:
            d["answer_requirement"] = self.answer_requirement
        if self.hint:
            d["hint"] = self.hint
        if self.explanation:
            d["explanation"] = self.explanation
        if self.figure_required is not None:
            d["figure_required"] = self.figure_required
        if self.children:
            key = "parts" if self.kind == PartKind.QUESTION else "subparts"
            d[key] = [child.to_dict() for child in self.children]
        return d

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Part({self.label!r}, {self.kind.value}, marks={self.marks})"
