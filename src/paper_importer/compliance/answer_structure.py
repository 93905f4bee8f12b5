"""
Module: compliance.answer_structure

Purpose:
    Validates a node's correct-answer alternatives before they are saved.
    All checks run every time and their messages accumulate; a save with
    any message is rejected as a whole.

    Editing helpers return new tuples and never validate; validation
    happens once, on save.

Key Functions:
    - validate_answer_structure(): Error messages for an alternative list
    - apply_answer_structure(): Save alternatives onto a Part, or raise
    - add_alternative(), remove_alternative(): Edit the list by id
    - link_alternatives(), unlink_alternatives(): Edit link groups
    - detect_answer_context(): Guess a context from the answer text

Used By:
    - cli: validate-answers command
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.models.answers import Alternative, AlternativeId, AnswerContext, MarkValue
from ..core.models.parts import Part

logger = logging.getLogger(__name__)


class AnswerStructureError(ValueError):
    """Raised when alternatives fail validation on save."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__(f"Answer structure invalid: {'; '.join(self.errors)}")


def validate_answer_structure(
    marks: MarkValue,
    alternatives: Sequence[Alternative],
    context_required: bool = False,
) -> List[str]:
    """
    Check an alternative list against its node's marks.

    Checks, all unconditional:
        1. Alternative marks sum to the node marks
        2. Alternative ids are unique
        3. Every linked id belongs to an alternative in the list
        4. With context_required, every alternative has context type and value

    Args:
        marks: Declared marks of the node
        alternatives: Alternatives being saved
        context_required: Enforce check 4

    Returns:
        Error messages; empty when the list can be saved

    Example:
        >>> alts = [Alternative("A", 1, 1, (4,))]
        >>> validate_answer_structure(1, alts)
        ['Alternative 1 links to non-existent ID: 4']
    """
    errors: List[str] = []

    total = sum(alt.marks for alt in alternatives)
    if total != marks:
        errors.append(f"Total marks ({total}) don't match question marks ({marks})")

    ids: set[AlternativeId] = set()
    for alt in alternatives:
        if alt.alternative_id in ids:
            errors.append(f"Duplicate alternative ID: {alt.alternative_id}")
        ids.add(alt.alternative_id)

    for alt in alternatives:
        for linked in alt.linked_alternatives:
            if linked not in ids:
                errors.append(f"Alternative {alt.alternative_id} links to non-existent ID: {linked}")

    if context_required:
        for alt in alternatives:
            if alt.context is None or not alt.context.is_complete:
                errors.append(f"Alternative {alt.alternative_id} missing context information")

    return errors


def apply_answer_structure(
    part: Part,
    alternatives: Sequence[Alternative],
    context_required: bool = False,
) -> Part:
    """
    Save alternatives onto a node.

    Args:
        part: Node being edited
        alternatives: New alternative list
        context_required: Require context on every alternative

    Returns:
        New Part carrying the alternatives

    Raises:
        AnswerStructureError: With every validation message; nothing is saved
    """
    errors = validate_answer_structure(part.marks, alternatives, context_required)
    if errors:
        logger.debug(f"Rejected answer structure for {part.label}: {errors}")
        raise AnswerStructureError(errors)
    return replace(part, correct_answers=tuple(alternatives))


# ─────────────────────────────────────────────────────────────────────────────
# Editing
# ─────────────────────────────────────────────────────────────────────────────

_OPTION_RE = re.compile(r"^[A-Z]$")
_POSITION_RE = re.compile(r"^(?:position|point|location)\s+([A-Z])$", re.IGNORECASE)
_STEP_RE = re.compile(r"^step\s+(\d+)", re.IGNORECASE)
_MEASUREMENT_RE = re.compile(r"\d+\s*(?:m|kg|s|°C|mol|L)", re.IGNORECASE)

LINK_GROUP_TYPES = ("one_required", "all_required")


def detect_answer_context(answer: str) -> AnswerContext:
    """
    Guess what an answer refers to from its text.

    Example:
        >>> detect_answer_context("Position X")
        AnswerContext(type='position', value='X', label='')
        >>> detect_answer_context("12 kg").type
        'measurement'
    """
    answer = answer.strip()
    if _OPTION_RE.match(answer):
        return AnswerContext(type="option", value=answer)
    match = _POSITION_RE.match(answer)
    if match:
        return AnswerContext(type="position", value=match.group(1).upper())
    match = _STEP_RE.match(answer)
    if match:
        return AnswerContext(type="step", value=match.group(1))
    if _MEASUREMENT_RE.search(answer):
        return AnswerContext(type="measurement", value=answer)
    return AnswerContext(type="descriptive", value="general")


def next_alternative_id(alternatives: Sequence[Alternative]) -> int:
    """One more than the highest integer id; 1 for an empty list."""
    numeric = [alt.alternative_id for alt in alternatives if isinstance(alt.alternative_id, int)]
    return max(numeric, default=0) + 1


def add_alternative(
    alternatives: Sequence[Alternative],
    answer: str = "",
    marks: MarkValue = 1,
    context: Optional[AnswerContext] = None,
) -> Tuple[Alternative, ...]:
    """
    Append a standalone alternative with the next free id.

    Args:
        alternatives: Current list
        answer: Answer text
        marks: Marks for the new alternative
        context: Context; guessed from the answer text when None

    Returns:
        New tuple ending with the added alternative
    """
    added = Alternative(
        answer=answer,
        marks=marks,
        alternative_id=next_alternative_id(alternatives),
        context=context if context is not None else detect_answer_context(answer),
    )
    return (*alternatives, added)


def remove_alternative(
    alternatives: Sequence[Alternative],
    alternative_id: AlternativeId,
) -> Tuple[Alternative, ...]:
    """Drop an alternative and every link pointing at it."""
    return tuple(
        replace(alt, linked_alternatives=tuple(
            linked for linked in alt.linked_alternatives if linked != alternative_id
        ))
        for alt in alternatives
        if alt.alternative_id != alternative_id
    )


def link_alternatives(
    alternatives: Sequence[Alternative],
    ids: Iterable[AlternativeId],
    alternative_type: str = "one_required",
) -> Tuple[Alternative, ...]:
    """
    Make the given alternatives one link group.

    Each member links to every other member and takes the group type.
    Links a member already had outside the group are replaced.

    Args:
        alternatives: Current list
        ids: Ids of the group members, in the order to store the links
        alternative_type: "one_required" or "all_required"

    Returns:
        New tuple with the group linked

    Raises:
        ValueError: If fewer than two members or the type is unknown
    """
    group = list(dict.fromkeys(ids))
    if len(group) < 2:
        raise ValueError("A link group needs at least two alternatives")
    if alternative_type not in LINK_GROUP_TYPES:
        raise ValueError(f"Unknown link group type: {alternative_type}")

    return tuple(
        replace(
            alt,
            linked_alternatives=tuple(i for i in group if i != alt.alternative_id),
            alternative_type=alternative_type,
        )
        if alt.alternative_id in group else alt
        for alt in alternatives
    )


def unlink_alternatives(
    alternatives: Sequence[Alternative],
    ids: Iterable[AlternativeId],
) -> Tuple[Alternative, ...]:
    """
    Remove the links between the given alternatives, in both directions.

    A member left with no links becomes standalone again.
    """
    group = set(ids)
    unlinked = []
    for alt in alternatives:
        if alt.alternative_id not in group:
            unlinked.append(alt)
            continue
        remaining = tuple(linked for linked in alt.linked_alternatives if linked not in group)
        unlinked.append(replace(
            alt,
            linked_alternatives=remaining,
            alternative_type=alt.alternative_type if remaining else "standalone",
        ))
    return tuple(unlinked)
