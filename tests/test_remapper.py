from __future__ import annotations

import copy
import random

import pytest

from remap_core.config import LETTERS
from remap_core.remapper import AnswerKeyRemapper, TableShapeError, combined_answer, score

from tests.conftest import FixedChoice, build_quiz_table, values


def test_single_question_scenario():
    table = [["Name", "Class", "Paris"], ["Alice", "X", "Paris"], ["Bob", "Y", "London"]]
    res = AnswerKeyRemapper(rng=FixedChoice("C")).transform(table)
    out = values(res.table)

    key = res.mappings[2].key_letter
    other = res.mappings[2].codes["London"]
    assert key == "C" and other != key and other in LETTERS
    assert out[0] == ["Name", "Class", key, key, "NILAI"]
    assert out[1] == ["Alice", "X", key, key, "1/1"]
    assert out[2] == ["Bob", "Y", other, other, "0/1"]
    assert res.scores == ["1/1", "0/1"]
    assert res.answer_key == key


def test_scenario_holds_for_any_draw():
    table = [["Name", "Class", "Paris"], ["Alice", "X", "Paris"], ["Bob", "Y", "London"]]
    for seed in range(10):
        res = AnswerKeyRemapper(rng=random.Random(seed)).transform(table)
        out = values(res.table)
        assert out[1][2] == out[0][2]
        assert out[2][2] != out[0][2]
        assert out[1][-1] == "1/1" and out[2][-1] == "0/1"


def test_caller_table_is_not_modified(quiz_table):
    before = copy.deepcopy(quiz_table)
    AnswerKeyRemapper(rng=random.Random(7)).transform(quiz_table)
    assert quiz_table == before


def test_missing_answer_becomes_empty_and_is_not_counted(quiz_table):
    res = AnswerKeyRemapper(rng=FixedChoice("A", "B", "C")).transform(quiz_table)
    out = values(res.table)
    # Rome / "5" / missing
    rome = out[3]
    assert rome[4] == ""
    assert len(rome[5]) == 2
    assert rome[6] == "0/2"


def test_combined_length_and_score_bounds(quiz_table):
    res = AnswerKeyRemapper(rng=random.Random(3)).transform(quiz_table)
    out = values(res.table)
    header_codes = out[0][2:5]
    for row in out[1:]:
        codes = row[2:5]
        combined, result = row[5], row[6]
        assert combined == "".join(c for c in codes if c in LETTERS)
        correct, total = (int(x) for x in result.split("/"))
        assert total == len(combined)
        assert correct <= total
        assert correct == sum(1 for c, k in zip(codes, header_codes) if c and c == k)
    assert values(res.table)[1][6] == "3/3"


def test_score_compares_same_column_after_blank():
    # blank first answer must not shift the second comparison
    assert score(["", "B"], ["A", "B"]) == "1/1"
    assert score(["A", "C", "E"], ["A", "B", "E"]) == "2/3"
    assert combined_answer(["", "A", "x", "E"]) == "AE"


def test_combined_header_can_be_disabled(quiz_table):
    res = AnswerKeyRemapper(rng=random.Random(1), combined_header=False, score_label="SCORE").transform(quiz_table)
    header = values(res.table)[0]
    assert header[5] == ""
    assert header[6] == "SCORE"
    assert res.answer_key == "".join(header[2:5])


def test_short_rows_are_padded(quiz_table):
    quiz_table.append(["Late", "Z"])
    res = AnswerKeyRemapper(rng=random.Random(2)).transform(quiz_table)
    last = values(res.table)[-1]
    assert last == ["Late", "Z", "", "", "", "", "0/0"]
    assert all(len(r) == 7 for r in res.table)


def test_identity_columns_pass_through_untouched():
    table = build_quiz_table(answers=[[1, 2, 3]])
    table[1][0] = 12345
    res = AnswerKeyRemapper(rng=random.Random(4)).transform(table)
    assert res.table[1][0].kind == "number"
    assert res.table[1][0].value == 12345


def test_wide_rows_permissive_and_strict():
    table = [["N", "C", "Q1"], ["a", "b", "Q", "stray"]]
    res = AnswerKeyRemapper(rng=FixedChoice("A")).transform(table)
    assert values(res.table)[1][-1] == "stray"
    with pytest.raises(TableShapeError):
        AnswerKeyRemapper(rng=FixedChoice("A"), strict=True).transform(table)


def test_trailing_blank_cells_do_not_widen_rows():
    table = [["N", "C", "Q1"], ["a", "b", "Q1", ""], ["c", "d", "x", None, ""]]
    res = AnswerKeyRemapper(rng=FixedChoice("A")).transform(table)
    assert [len(r) for r in res.table] == [5, 5, 5]
    assert values(res.table)[1] == ["a", "b", "A", "A", "1/1"]

    strict = AnswerKeyRemapper(rng=FixedChoice("A"), strict=True).transform(table)
    assert [len(r) for r in strict.table] == [5, 5, 5]


def test_empty_table():
    res = AnswerKeyRemapper().transform([])
    assert res.table == [] and res.scores == []
    with pytest.raises(TableShapeError):
        AnswerKeyRemapper(strict=True).transform([])
    with pytest.raises(TableShapeError):
        AnswerKeyRemapper(strict=True).transform([["Name", "Class"]])


def test_widths_are_attached(quiz_table):
    res = AnswerKeyRemapper(rng=random.Random(5)).transform(quiz_table)
    assert len(res.column_widths) == 7
    assert res.column_widths[0] == len("Student 1") + 2
    assert res.column_widths[6] == len("NILAI") + 2


def test_from_config_reads_flags():
    r = AnswerKeyRemapper.from_config({"COMBINED_HEADER": False, "STRICT_SHAPE": True, "OVERFLOW": "error", "SCORE_LABEL": "S"})
    assert (r.combined_header, r.strict, r.overflow, r.score_label) == (False, True, "error", "S")
