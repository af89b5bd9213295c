"""Bulk MCQ parsing for pasted question text.

One question per line, choices inline::

    1. Where is the meeting? A. In room 4 *B. Upstairs C. Online.

A leading ``12.`` ordinal is cosmetic and dropped; output order follows
line order. A ``*`` before a choice letter marks the correct answer. Any
number of markers is accepted, including none.

The parser is best-effort and never raises: tokens that do not look like
``A. text`` are kept verbatim as choice text.
"""

from __future__ import annotations

import itertools
import re
import time
from collections.abc import Iterator

from toeic_admin.domain.models import ParsedChoice, ParsedQuestion

_LINE_BREAK = re.compile(r"\r?\n")
_ORDINAL_PREFIX = re.compile(r"^\s*\d+\.\s*")
# A choice marker only counts at the start of the line or right after
# whitespace. A capital-period glued to the preceding text ("No.A." or
# "3.B.") stays part of the current stem or choice.
_CHOICES_START = re.compile(r"(?:^|\s)(?P<marker>\*?[A-Z]\.)")
_CHOICE_BOUNDARY = re.compile(r"\s+(?=\*?[A-Z]\.)")
_CHOICE_TOKEN = re.compile(r"^(?P<star>\*?)(?P<letter>[A-Z])\.\s*(?P<text>.*)$", re.DOTALL)
_CONTINUATION_LINE = re.compile(r"^\*?[A-Z]\.")


def _default_base_id() -> int:
    return int(time.time() * 1000)


def _logical_lines(raw_text: str, join_choice_lines: bool) -> list[str]:
    lines = [line.strip() for line in _LINE_BREAK.split(raw_text)]
    lines = [line for line in lines if line]
    if not join_choice_lines:
        return lines

    merged: list[str] = []
    for line in lines:
        if merged and _CONTINUATION_LINE.match(line):
            merged[-1] = f"{merged[-1]} {line}"
        else:
            merged.append(line)
    return merged


def split_stem(line: str) -> tuple[str, str]:
    """Return ``(stem, choices_segment)`` for one line without its ordinal."""
    match = _CHOICES_START.search(line)
    if match is None:
        return "", line.strip()

    start = match.start("marker")
    return line[:start].strip(), line[start:].strip()


def parse_choice_token(token: str, choice_id: int) -> ParsedChoice:
    match = _CHOICE_TOKEN.match(token)
    if match:
        text = match.group("text").strip()
        if text.endswith("."):
            text = text[:-1]
        return ParsedChoice(id=choice_id, text=text, is_correct=match.group("star") == "*")

    starred = token.endswith("*")
    text = token[:-1] if starred else token
    return ParsedChoice(id=choice_id, text=text.strip(), is_correct=starred)


def parse_question_line(line: str, *, line_number: int, ids: Iterator[int]) -> ParsedQuestion:
    body = _ORDINAL_PREFIX.sub("", line, count=1)
    stem, choices_segment = split_stem(body)
    question_id = next(ids)

    tokens = [token for token in _CHOICE_BOUNDARY.split(choices_segment) if token]
    choices = [parse_choice_token(token, next(ids)) for token in tokens]

    return ParsedQuestion(
        id=question_id,
        kind="mcq",
        title=stem or f"Question {line_number}",
        choices=choices,
    )


def parse_bulk_questions(
    raw_text: str,
    *,
    base_id: int | None = None,
    join_choice_lines: bool = False,
) -> list[ParsedQuestion]:
    """Parse pasted text into MCQ records, one per non-blank line.

    Ids are drawn from a single counter starting at ``base_id`` (epoch
    milliseconds by default), so question and choice ids never collide
    within one call.

    With ``join_choice_lines`` a line that starts with a choice marker is
    appended to the previous line first, which accepts the
    "question on one line, choices below" layout.
    """
    if not raw_text or not raw_text.strip():
        return []

    ids = itertools.count(_default_base_id() if base_id is None else base_id)
    return [
        parse_question_line(line, line_number=idx, ids=ids)
        for idx, line in enumerate(_logical_lines(raw_text, join_choice_lines), start=1)
    ]
