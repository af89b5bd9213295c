from toeic_admin.domain.bulk_parser import parse_bulk_questions, parse_choice_token, split_stem


def _summary(question):
    return question.title, [(c.text, c.is_correct) for c in question.choices]


def test_one_question_per_non_blank_line_in_input_order():
    text = "\n".join(
        [
            "3. Third listed first A. one B. two",
            "   ",
            "1. First listed second A. uno *B. dos",
            "",
            "2. Last A. x",
        ]
    )

    questions = parse_bulk_questions(text, base_id=1)

    assert [q.title for q in questions] == ["Third listed first", "First listed second", "Last"]


def test_stem_and_marked_choice():
    questions = parse_bulk_questions("1. What? A. foo *B. bar", base_id=1)

    assert len(questions) == 1
    assert questions[0].kind == "mcq"
    assert _summary(questions[0]) == ("What?", [("foo", False), ("bar", True)])


def test_empty_stem_falls_back_to_line_number():
    questions = parse_bulk_questions("A. x B. y", base_id=1)

    assert questions[0].title == "Question 1"
    assert [c.text for c in questions[0].choices] == ["x", "y"]


def test_fallback_title_uses_position_among_non_blank_lines():
    questions = parse_bulk_questions("Stem A. a\n\nA. b B. c", base_id=1)

    assert [q.title for q in questions] == ["Stem", "Question 2"]


def test_blank_lines_are_skipped():
    questions = parse_bulk_questions("Q1. A. a\n\nQ2. A. b", base_id=1)

    assert len(questions) == 2
    assert [q.title for q in questions] == ["Q1.", "Q2."]


def test_windows_line_endings():
    questions = parse_bulk_questions("1. One A. a\r\n2. Two A. b\r\n", base_id=1)

    assert [q.title for q in questions] == ["One", "Two"]


def test_trailing_period_is_stripped_once():
    questions = parse_bulk_questions("Pick one A. Mr. Lee.. B. Ms. Park.", base_id=1)

    assert [c.text for c in questions[0].choices] == ["Mr. Lee.", "Ms. Park"]


def test_letter_period_without_leading_space_does_not_split():
    questions = parse_bulk_questions("Choose A. use plan-B. today B. wait (cf.A.) here", base_id=1)

    assert [c.text for c in questions[0].choices] == ["use plan-B. today", "wait (cf.A.) here"]


def test_multiple_and_missing_correct_markers_pass_through():
    questions = parse_bulk_questions("Q A. a *B. b *C. c\nR A. a B. b", base_id=1)

    assert [c.is_correct for c in questions[0].choices] == [False, True, True]
    assert [c.is_correct for c in questions[1].choices] == [False, False]


def test_line_without_choice_marker_becomes_single_fallback_choice():
    questions = parse_bulk_questions("free text answer*", base_id=1)

    assert questions[0].title == "Question 1"
    assert _summary(questions[0])[1] == [("free text answer", True)]


def test_ordinal_only_line_has_no_choices():
    questions = parse_bulk_questions("12.", base_id=1)

    assert questions[0].title == "Question 1"
    assert questions[0].choices == []


def test_ids_are_unique_and_increasing():
    questions = parse_bulk_questions("1. A A. a B. b\n2. B A. c B. d", base_id=100)

    ids = []
    for q in questions:
        ids.append(q.id)
        ids.extend(c.id for c in q.choices)
    assert ids == list(range(100, 106))


def test_join_choice_lines_folds_choices_onto_previous_question():
    text = "1. Where is the office?\nA. Upstairs\n*B. Downstairs\n2. Who called? A. Tom *B. Ann"

    joined = parse_bulk_questions(text, base_id=1, join_choice_lines=True)
    plain = parse_bulk_questions(text, base_id=1)

    assert len(joined) == 2
    assert _summary(joined[0]) == ("Where is the office?", [("Upstairs", False), ("Downstairs", True)])
    assert len(plain) == 4


def test_empty_input():
    assert parse_bulk_questions("") == []
    assert parse_bulk_questions(" \n\t\n") == []


def test_split_stem_and_token_helpers():
    assert split_stem("Stem here *C. yes") == ("Stem here", "*C. yes")
    assert split_stem("no markers") == ("", "no markers")

    choice = parse_choice_token("*D.   final answer.", 7)
    assert (choice.id, choice.text, choice.is_correct) == (7, "final answer", True)


def test_only_newlines_separate_questions():
    text = "1. Soft\x0bbreak A. a *B. b\r\n2. Form\x0cfeed A. c  B. d"

    questions = parse_bulk_questions(text, base_id=1)

    assert len(questions) == 2
    assert questions[0].title == "Soft\x0bbreak"
    assert [c.text for c in questions[1].choices] == ["c", "d"]
