"""
Command-line interface for the past paper importer.

Commands:
    match PAPER --catalog CATALOG [--json]
        Extract paper metadata and match it to a catalog data structure.
    check PAPER [--config RULES] [--rules id,id] [--include-parts]
          [--category C] [--only-failed] [--search TEXT] [--report OUT]
        Run extraction rule checks; exit 1 if any required rule failed.
    validate-answers PAPER [--context-required] [--config RULES]
        Validate correct-answer alternatives; exit 1 on errors.
    guidelines PAPER [--config RULES] [--json] [--suggest]
        Compare the paper's mark-scheme conventions with the rules config;
        exit 1 if any checklist item is a warning.

Input errors (unreadable files, schema problems) exit with status 2.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .common.mappings import MappingTables, load_mapping_tables
from .compliance.answer_structure import validate_answer_structure
from .compliance.config import load_rules_config
from .compliance.engine import evaluate_questions
from .compliance.guidelines import ChecklistStatus, analyze_guidelines, build_checklist, suggest_rules_config
from .compliance.report import build_report, write_report
from .compliance.rules import build_default_rules
from .compliance.summary import ALL_CATEGORIES, filter_results, summarize
from .core.schemas.validator import ValidationError, check_import_payload
from .core.utils.serialization import load_paper, serialize_question
from .errors import CatalogLoadError, ImporterError
from .resolver import load_catalog, resolve_paper

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INPUT_ERROR = 2


def _tables(args: argparse.Namespace) -> Optional[MappingTables]:
    return load_mapping_tables(args.tables) if args.tables else None


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def cmd_match(args: argparse.Namespace) -> int:
    paper = load_paper(args.paper, strict=args.strict)
    try:
        catalog = load_catalog(args.catalog, strict=args.strict)
    except CatalogLoadError as e:
        # Extraction still runs; matching waits for a usable catalog
        logger.error(f"{e}; skipping data structure matching")
        catalog = None
    resolution = resolve_paper(paper.metadata, catalog, tables=_tables(args))
    upload_check = check_import_payload({
        **paper.metadata,
        "questions": [serialize_question(q) for q in paper.questions],
    })

    if args.json:
        output = resolution.to_dict()
        output["importCheck"] = {"errors": upload_check.errors, "warnings": upload_check.warnings}
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return EXIT_OK

    meta = resolution.metadata
    print(f"Paper:     {meta.title}")
    print(f"Provider:  {meta.provider or '-'}  (from {meta.exam_board or '-'})")
    print(f"Program:   {meta.program or '-'}  (from {meta.qualification or '-'})")
    print(f"Subject:   {meta.subject or '-'}  [{meta.subject_code or '-'}]")
    print(f"Paper:     {meta.paper_number or '-'} variant {meta.variant_number or '-'} ({meta.paper_type or '-'})")
    for message in (*resolution.errors, *upload_check.errors):
        print(f"  ERROR    {message}")
    for message in upload_check.warnings:
        print(f"  WARNING  {message}")

    match = resolution.match
    print()
    if match is not None and match.is_match:
        print(f"Matched data structure {match.data_structure_id} "
              f"(confidence {match.confidence:.0%})")
        for reason in match.matched_on:
            print(f"  + {reason}")
    else:
        print("No data structure matched")
    for suggestion in (match.suggestions if match is not None else ()):
        print(f"  ? {suggestion}")
    return EXIT_OK


def cmd_check(args: argparse.Namespace) -> int:
    paper = load_paper(args.paper, strict=args.strict)
    config = load_rules_config(args.config)
    tables = _tables(args)
    rules = build_default_rules(config, tables)
    subset = [r.strip() for r in args.rules.split(",") if r.strip()] if args.rules else None

    results = evaluate_questions(paper.questions, rule_ids=subset, rules=rules,
                                 include_parts=args.include_parts)
    summary = summarize(results)

    if args.report:
        write_report(args.report, build_report(results, summary))

    print(f"Questions: {summary.total_questions}  "
          f"fully compliant: {summary.fully_compliant}  "
          f"partial: {summary.partially_compliant}  "
          f"non-compliant: {summary.non_compliant}  "
          f"average score: {summary.average_score}%")

    shown = filter_results(results, paper.questions, search=args.search,
                           only_failed=args.only_failed, category=args.category, rules=rules)
    for key, result in shown.items():
        print(f"\n{key}: {result.score}% ({result.passed_rules}/{result.total_rules} rules)")
        for failure in result.failed_rules:
            print(f"  {failure.severity.value.upper():<8} {failure.rule_name}: {failure.message}")
        for warning in result.warnings:
            print(f"  {'NOTE':<8} {warning.rule_id}: {warning.message}")

    blocked = any(result.has_errors for result in results.values())
    return EXIT_FAILED if blocked else EXIT_OK


def cmd_validate_answers(args: argparse.Namespace) -> int:
    paper = load_paper(args.paper, strict=args.strict)
    context_required = args.context_required
    if args.config:
        context_required = context_required or load_rules_config(args.config).answer_structure.require_context

    invalid = 0
    for question in paper.questions:
        for part in question.all_parts:
            # Nodes without answers (e.g. question stems with parts) have nothing to save
            if not part.correct_answers:
                continue
            errors = validate_answer_structure(part.marks, part.correct_answers, context_required)
            if errors:
                invalid += 1
                print(f"{part.label}:")
                for error in errors:
                    print(f"  {error}")

    if invalid:
        print(f"\n{invalid} answer lists need fixing")
        return EXIT_FAILED
    print("All answer structures valid")
    return EXIT_OK


def cmd_guidelines(args: argparse.Namespace) -> int:
    paper = load_paper(args.paper, strict=args.strict)
    config = load_rules_config(args.config)
    summary = analyze_guidelines(paper.payload)
    checklist = build_checklist(summary, config)
    warnings = [item for item in checklist if item.status == ChecklistStatus.WARNING]

    if args.json:
        output = {
            "summary": summary.to_dict(),
            "checklist": [item.to_dict() for item in checklist],
        }
        if args.suggest:
            output["suggestedConfig"] = suggest_rules_config(summary, config).to_dict()
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return EXIT_FAILED if warnings else EXIT_OK

    print(f"Exam board: {summary.exam_board or '-'}  "
          f"subjects: {', '.join(summary.subjects) or '-'}")
    if summary.abbreviations:
        print(f"Abbreviations: {', '.join(summary.abbreviations)}")
    for group in ("core", "mark_scheme"):
        print()
        for item in checklist:
            if item.group == group:
                print(f"  {item.status.value.upper():<9} {item.label}: {item.description}")

    if args.suggest:
        print()
        print(json.dumps(suggest_rules_config(summary, config).to_dict(), indent=2))

    if warnings:
        print(f"\n{len(warnings)} guideline items need a config change")
        return EXIT_FAILED
    return EXIT_OK


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paper-importer",
        description="Resolve past paper metadata and check extracted questions before import",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("paper", type=Path, help="Uploaded paper JSON file")
    common.add_argument("--strict", action="store_true", help="Full JSON Schema validation of inputs")

    sub = parser.add_subparsers(dest="command", required=True)

    p_match = sub.add_parser("match", parents=[common], help="Match paper metadata to the catalog")
    p_match.add_argument("--catalog", type=Path, required=True, help="Catalog export JSON")
    p_match.add_argument("--json", action="store_true", help="Print the result as JSON")
    p_match.add_argument("--tables", type=Path, help="Custom mapping tables JSON")
    p_match.set_defaults(func=cmd_match)

    p_check = sub.add_parser("check", parents=[common], help="Run extraction rule checks")
    p_check.add_argument("--config", type=Path, help="Extraction rules config JSON")
    p_check.add_argument("--rules", help="Comma-separated rule ids to check (default: all)")
    p_check.add_argument("--include-parts", action="store_true", help="Also check each part and subpart")
    p_check.add_argument("--category", default=ALL_CATEGORIES,
                         help="Show only: all, passed, structure, content, educational, subject")
    p_check.add_argument("--only-failed", action="store_true", help="Hide fully compliant questions")
    p_check.add_argument("--search", default="", help="Filter by question number or text")
    p_check.add_argument("--report", type=Path, help="Write the JSON compliance report here")
    p_check.add_argument("--tables", type=Path, help="Custom mapping tables JSON")
    p_check.set_defaults(func=cmd_check)

    p_answers = sub.add_parser("validate-answers", parents=[common],
                               help="Validate correct-answer alternatives")
    p_answers.add_argument("--context-required", action="store_true",
                           help="Require context type and value on every alternative")
    p_answers.add_argument("--config", type=Path, help="Extraction rules config JSON")
    p_answers.set_defaults(func=cmd_validate_answers)

    p_guide = sub.add_parser("guidelines", parents=[common],
                             help="Compare mark-scheme conventions with the rules config")
    p_guide.add_argument("--config", type=Path, help="Extraction rules config JSON")
    p_guide.add_argument("--json", action="store_true", help="Print summary and checklist as JSON")
    p_guide.add_argument("--suggest", action="store_true", help="Also print the suggested rules config")
    p_guide.set_defaults(func=cmd_guidelines)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    try:
        return args.func(args)
    except ValidationError as e:
        location = f" at {e.path}" if e.path else ""
        logger.error(f"{e}{location}")
        return EXIT_INPUT_ERROR
    except ImporterError as e:
        logger.error(str(e))
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
