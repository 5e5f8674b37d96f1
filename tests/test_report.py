import json

import pytest

from plaintrim_checker.constants import RAW_ENCODING
from plaintrim_checker.models import ClassificationResult, Outcome, TextMode, WalkTotals
from plaintrim_checker.pathrules import ScanConfig, SuffixFilter
from plaintrim_checker.report import format_result, format_summary, json_dumps, to_json, to_text_report

@pytest.mark.parametrize("totals,expected", [
    (WalkTotals(files=2, folders=1, correct=1, errors=1), "Found 2 files in 1 folder: 1 was correct and 1 had errors."),
    (WalkTotals(files=1, folders=0, correct=0, errors=1), "Found 1 file in 0 folders: 0 were correct and 1 had errors."),
    (WalkTotals(files=1234, folders=56, correct=1200, errors=34), "Found 1,234 files in 56 folders: 1,200 were correct and 34 had errors."),
])
def test_summary(totals, expected):
    assert format_summary(totals) == expected

def test_correct_line_uses_text_type():
    r = ClassificationResult(path="x", outcome=Outcome.CORRECT)
    assert format_result("a.txt", r, ScanConfig.for_mode(TextMode.PLAIN)) == "a.txt - is plain text"
    assert format_result("a.txt", r, ScanConfig.for_mode(TextMode.TRIM)) == "a.txt - is trimmed text"

def test_invalid_character_is_upper_hex():
    r = ClassificationResult(path="x", outcome=Outcome.INVALID_CHARACTER, bad_char=0xfffd)
    assert format_result("a.txt", r, ScanConfig()) == "a.txt - invalid character, 0xFFFD"

def test_encoding_error_line():
    r = ClassificationResult(path="x", outcome=Outcome.ENCODING_ERROR)
    assert format_result("a.txt", r, ScanConfig(encoding="klingon")) == "a.txt - invalid character set name <klingon>"

def test_json_report():
    cfg = ScanConfig(encoding=RAW_ENCODING, suffix_filter=SuffixFilter.parse(".txt .md"))
    totals = WalkTotals(files=1, folders=1, correct=1, errors=0)
    data = to_json(["docs"], cfg, totals, ["a.txt - is plain trimmed text"])
    parsed = json.loads(json_dumps(data))
    assert parsed["totals"] == {"files": 1, "folders": 1, "correct": 1, "errors": 0}
    assert parsed["status"] == "success"
    assert parsed["config"]["suffixes"] == [".txt", ".md"]
    assert parsed["cancelled"] is False

def test_text_report():
    assert to_text_report(["one", "two"]) == "one\ntwo\n"
    assert to_text_report([]) == ""
