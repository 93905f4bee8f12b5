"""
Module: answers

Purpose:
    Provides the correct-answer models attached to every question node:
    Alternative (one creditable answer), AnswerContext (what the answer
    refers to) and Option (an MCQ choice). All are immutable.

Key Functions:
    - coerce_marks(value): Parse a raw mark value into int (or float)
    - coerce_alternative_id(value, fallback): Parse an alternative id or link
    - Alternative.from_dict() / Alternative.to_dict(): Serialization
    - Option.from_dict() / Option.to_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - typing (std)

Used By:
    - core.models.parts.Part
    - core.utils.serialization
    - compliance.rules
    - compliance.answer_structure
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

MarkValue = Union[int, float]

# Ids that do not parse as integers are kept as text so that link and
# duplicate checks can still report them.
AlternativeId = Union[int, str]


def coerce_marks(value: Any) -> MarkValue:
    """
    Parse a raw mark value from imported JSON.

    Integral values become int. Fractional values stay float so that
    mark-sum checks can still compare them exactly. Anything that is not
    a number (None, "", "n/a") counts as 0.

    Args:
        value: Raw value (int, float, numeric string or None)

    Returns:
        Parsed mark value

    Example:
        >>> coerce_marks("3")
        3
        >>> coerce_marks(1.5)
        1.5
        >>> coerce_marks(None)
        0
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0
    if number != number:  # NaN
        return 0
    return int(number) if number.is_integer() else number


def coerce_alternative_id(value: Any, fallback: Optional[int] = None) -> Optional[AlternativeId]:
    """
    Parse an alternative id or linked id from imported JSON.

    Integers and integral strings become int. Anything else that is not
    blank is kept verbatim as a string; it will not resolve against the
    integer ids of well-formed alternatives.

    Args:
        value: Raw id value
        fallback: Returned for None or blank values

    Returns:
        Parsed id, or fallback

    Example:
        >>> coerce_alternative_id("3")
        3
        >>> coerce_alternative_id("2b")
        '2b'
        >>> coerce_alternative_id(None, fallback=1)
        1
    """
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    text = str(value).strip()
    if not text:
        return fallback
    try:
        return int(text)
    except ValueError:
        return text


@dataclass(frozen=True, slots=True)
class AnswerContext:
    """
    What an answer refers to (an MCQ option, a diagram position, a step...).

    Attributes:
        type: Context kind, e.g. "option", "position", "step"
        value: Context value, e.g. "A", "X", "1"
        label: Optional human label
    """

    type: str = ""
    value: str = ""
    label: str = ""

    @property
    def is_complete(self) -> bool:
        """Both type and value are present."""
        return bool(self.type) and bool(self.value)

    def to_dict(self) -> dict:
        d = {"type": self.type, "value": self.value}
        if self.label:
            d["label"] = self.label
        return d

    @classmethod
    def from_dict(cls, data: Any) -> Optional[AnswerContext]:
        if not isinstance(data, dict):
            return None
        return cls(
            type=str(data.get("type") or ""),
            value=str(data.get("value") or ""),
            label=str(data.get("label") or ""),
        )


@dataclass(frozen=True, slots=True)
class Alternative:
    """
    One creditable correct answer within a question node.

    Alternatives are linked to each other by id to express
    "either of these" groups.

    Attributes:
        answer: Answer text
        marks: Marks awarded for this alternative
        alternative_id: Id unique within the owning node
        linked_alternatives: Ids of alternatives this one is linked to
        alternative_type: "one_required", "all_required" or "standalone"
        context: What the answer refers to (None when absent)
        unit: Optional unit for numerical answers

    Example:
        >>> alt = Alternative(answer="8 bits", marks=1, alternative_id=1)
        >>> alt.linked_alternatives
        ()
    """

    answer: str
    marks: MarkValue
    alternative_id: AlternativeId
    linked_alternatives: Tuple[AlternativeId, ...] = ()
    alternative_type: str = "standalone"
    context: Optional[AnswerContext] = None
    unit: str = ""

    def to_dict(self) -> dict:
        d = {
            "answer": self.answer,
            "marks": self.marks,
            "alternative_id": self.alternative_id,
            "linked_alternatives": list(self.linked_alternatives),
            "alternative_type": self.alternative_type,
        }
        if self.context is not None:
            d["context"] = self.context.to_dict()
        if self.unit:
            d["unit"] = self.unit
        return d

    @classmethod
    def from_dict(cls, data: dict, index: int = 0) -> Alternative:
        """
        Deserialize from dictionary.

        Ids and links that are not integers are kept as strings, so
        "2b" in linked_alternatives later fails the linking checks
        instead of disappearing.

        Args:
            data: Dict representation
            index: Position in the answer list, used when the id is missing

        Returns:
            Alternative instance
        """
        raw_links = data.get("linked_alternatives") or []
        if not isinstance(raw_links, (list, tuple)):
            raw_links = [raw_links]
        linked = tuple(
            link for link in (coerce_alternative_id(item) for item in raw_links)
            if link is not None
        )

        return cls(
            answer=str(data.get("answer") or ""),
            marks=coerce_marks(data.get("marks")),
            alternative_id=coerce_alternative_id(data.get("alternative_id"), fallback=index + 1),
            linked_alternatives=linked,
            alternative_type=str(data.get("alternative_type") or "standalone"),
            context=AnswerContext.from_dict(data.get("context")),
            unit=str(data.get("unit") or ""),
        )


@dataclass(frozen=True, slots=True)
class Option:
    """
    Multiple-choice option.

    Attributes:
        label: Option letter, e.g. "A"
        text: Option text
        is_correct: Whether this option is the keyed answer
    """

    label: str
    text: str = ""
    is_correct: bool = False

    def to_dict(self) -> dict:
        return {"label": self.label, "text": self.text, "is_correct": self.is_correct}

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> Option:
        if not isinstance(data, dict):
            # Bare strings are accepted as option text
            return cls(label=chr(ord("A") + index), text=str(data))
        return cls(
            label=str(data.get("label") or data.get("option") or chr(ord("A") + index)),
            text=str(data.get("text") or ""),
            is_correct=bool(data.get("is_correct", False)),
        )
