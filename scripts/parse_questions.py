from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from toeic_admin.domain.bulk_parser import parse_bulk_questions  # noqa: E402
from toeic_admin.domain.models import ParsedQuestion  # noqa: E402


def question_metrics(questions: list[ParsedQuestion]) -> dict[str, Any]:
    if not questions:
        return {
            "questionCount": 0,
            "avgChoiceCount": 0.0,
            "noChoiceCount": 0,
            "noCorrectCount": 0,
            "multiCorrectCount": 0,
            "fallbackTitleCount": 0,
        }

    correct_counts = [sum(1 for c in q.choices if c.is_correct) for q in questions]
    return {
        "questionCount": len(questions),
        "avgChoiceCount": round(sum(len(q.choices) for q in questions) / len(questions), 2),
        "noChoiceCount": sum(1 for q in questions if not q.choices),
        "noCorrectCount": sum(1 for n in correct_counts if n == 0),
        "multiCorrectCount": sum(1 for n in correct_counts if n > 1),
        "fallbackTitleCount": sum(1 for q in questions if q.title.startswith("Question ")),
    }


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Dry-run the bulk question parser on a pasted-text file and report what it would import."
    )
    parser.add_argument("input", type=Path, help="Text file, one question per line")
    parser.add_argument(
        "--join-choice-lines",
        action="store_true",
        help="Fold lines that start with a choice marker onto the previous question",
    )
    parser.add_argument("--preview", type=int, default=5, help="Number of parsed questions to include")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to save JSON report")
    args = parser.parse_args()

    input_path = args.input.expanduser().resolve()
    if not input_path.exists() or not input_path.is_file():
        print(f"Input file not found: {input_path}", file=sys.stderr)
        return 2

    questions = parse_bulk_questions(
        input_path.read_text(encoding="utf-8"),
        base_id=1,
        join_choice_lines=args.join_choice_lines,
    )
    report = {
        "input": {"path": str(input_path), "joinChoiceLines": args.join_choice_lines},
        "metrics": question_metrics(questions),
        "questionsPreview": [q.to_dict() for q in questions[: max(0, args.preview)]],
    }

    rendered = json.dumps(report, ensure_ascii=False, indent=2)
    print(rendered)

    if args.output is not None:
        output_path = args.output.expanduser().resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered + "\n", encoding="utf-8")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
