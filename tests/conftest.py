import json
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import paper_importer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


# Common test fixtures
@pytest.fixture
def sample_paper_payload() -> dict:
    """A small uploaded paper: one compliant question, one with problems."""
    return {
        "exam_board": "Cambridge",
        "qualification": "IGCSE",
        "subject": "Physics - 0625",
        "paper_code": "0625/42",
        "paper_name": "Paper 4 Theory (Extended)",
        "exam_year": "2023",
        "exam_session": "May/June",
        "paper_duration": "1 hour 15 minutes",
        "total_marks": "80",
        "questions": [
            {
                "question_number": "1",
                "topic": "Motion, forces and energy",
                "unit": "Kinematics",
                "type": "descriptive",
                "marks": 5,
                "question_description": "A car accelerates from rest.",
                "answer_format": "single_line",
                "hint": "Use v = u + at",
                "explanation": "Acceleration is the change in velocity per unit time.",
                "correct_answers": [
                    {
                        "answer": "3 m/s2",
                        "marks": 3,
                        "alternative_id": 1,
                        "linked_alternatives": [2],
                        "context": {"type": "value", "value": "acceleration"},
                    },
                    {
                        "answer": "2 s",
                        "marks": 2,
                        "alternative_id": 2,
                        "linked_alternatives": [1],
                        "context": {"type": "value", "value": "time"},
                    },
                ],
            },
            {
                "question_number": "2",
                "type": "descriptive",
                "marks": 4,
                "question_description": "The diagram shows a circuit.",
                "parts": [
                    {
                        "part": "a",
                        "marks": 2,
                        "question_description": "State the current.",
                        "correct_answer": "0.5 A",
                    },
                    {
                        "part": "b",
                        "marks": 2,
                        "subparts": [
                            {"subpart": "i", "marks": 1, "question_description": "Name X."},
                            {"marks": 1, "question_description": "Name Y.", "attachments": "fig2.png"},
                        ],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def catalog_rows() -> list:
    """Catalog export rows in the relational-store shape."""
    return [
        {
            "id": "ds-chem",
            "status": "active",
            "regions": {"id": "r-int", "name": "International"},
            "programs": {"id": "p-igcse", "name": "IGCSE"},
            "providers": {"id": "v-cie", "name": "Cambridge International (CIE)"},
            "edu_subjects": {"id": "s-chem", "name": "Chemistry", "code": "0620"},
        },
        {
            "id": "ds-phys",
            "status": "active",
            "regions": {"id": "r-int", "name": "International"},
            "programs": {"id": "p-igcse", "name": "IGCSE"},
            "providers": {"id": "v-cie", "name": "Cambridge International (CIE)"},
            "edu_subjects": {"id": "s-phys", "name": "Physics", "code": "0625"},
        },
        {
            "id": "ds-old",
            "status": "inactive",
            "regions": {"id": "r-int", "name": "International"},
            "programs": {"id": "p-igcse", "name": "IGCSE"},
            "providers": {"id": "v-cie", "name": "Cambridge International (CIE)"},
            "edu_subjects": {"id": "s-phys", "name": "Physics", "code": "0625"},
        },
    ]


@pytest.fixture
def paper_file(tmp_path: Path, sample_paper_payload: dict) -> Path:
    path = tmp_path / "paper.json"
    path.write_text(json.dumps(sample_paper_payload), encoding="utf-8")
    return path


@pytest.fixture
def catalog_file(tmp_path: Path, catalog_rows: list) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog_rows), encoding="utf-8")
    return path
