import threading
from pathlib import Path

import pytest

from plaintrim_checker.classifier import UnitScanner, UnsupportedEncoding, classify_file, resolve_encoding
from plaintrim_checker.constants import LOCAL_ENCODING, RAW_ENCODING, READ_BLOCK_SIZE
from plaintrim_checker.models import Outcome


def _write(tmp_path: Path, data: bytes, name: str = "f.txt") -> Path:
    p = tmp_path / name
    p.write_bytes(data)
    return p

def test_clean_file_is_correct(tmp_path):
    p = _write(tmp_path, b"int main()\n{\treturn 0;\n}\r\n")
    r = classify_file(p, RAW_ENCODING)
    assert r.outcome is Outcome.CORRECT
    assert r.bad_char is None
    assert r.trailing_space is False

def test_trailing_space_before_newline(tmp_path):
    p = _write(tmp_path, b"line one\nline two  \nline three\n")
    r = classify_file(p, RAW_ENCODING)
    assert r.outcome is Outcome.TRAILING_WHITESPACE

def test_trailing_space_before_carriage_return(tmp_path):
    p = _write(tmp_path, b"abc\t\r\ndef\r\n")
    assert classify_file(p, RAW_ENCODING).outcome is Outcome.TRAILING_WHITESPACE

def test_trailing_tab_at_end_of_file(tmp_path):
    p = _write(tmp_path, b"abc\ndef\t")
    assert classify_file(p, RAW_ENCODING).outcome is Outcome.TRAILING_WHITESPACE

@pytest.mark.parametrize("byte", [0x00, 0x80, 0xFF, 0x7F, 0x01])
def test_invalid_byte_reported(tmp_path, byte):
    p = _write(tmp_path, b"abc" + bytes([byte]) + b"def\n")
    r = classify_file(p, RAW_ENCODING)
    assert r.outcome is Outcome.INVALID_CHARACTER
    assert r.bad_char == byte

def test_first_invalid_byte_wins(tmp_path):
    p = _write(tmp_path, b"a\x80b\xffc\n")
    assert classify_file(p, RAW_ENCODING).bad_char == 0x80

def test_both_problems_reported_together(tmp_path):
    p = _write(tmp_path, b"ok\xff\nbad \n")
    r = classify_file(p, RAW_ENCODING)
    assert r.outcome is Outcome.BOTH
    assert r.bad_char == 0xFF
    assert r.trailing_space

def test_nul_and_del_keep_pending_whitespace(tmp_path):
    p = _write(tmp_path, b"ab \x00\ncd\t\x7f\n")
    r = classify_file(p, RAW_ENCODING, check_plain=False, check_trim=True)
    assert r.outcome is Outcome.TRAILING_WHITESPACE
    assert r.bad_char is None

def test_other_invalid_byte_cancels_pending_whitespace(tmp_path):
    p = _write(tmp_path, b"ab \x80\n")
    r = classify_file(p, RAW_ENCODING, check_plain=False, check_trim=True)
    assert r.outcome is Outcome.CORRECT

def test_plain_only_ignores_trailing_space(tmp_path):
    p = _write(tmp_path, b"ab  \ncd\t\n")
    assert classify_file(p, RAW_ENCODING, check_plain=True, check_trim=False).outcome is Outcome.CORRECT

def test_trim_only_ignores_invalid_characters(tmp_path):
    p = _write(tmp_path, b"caf\xe9\n")
    assert classify_file(p, RAW_ENCODING, check_plain=False, check_trim=True).outcome is Outcome.CORRECT

def test_no_checks_is_correct(tmp_path):
    p = _write(tmp_path, b"\xff\xfe \n")
    assert classify_file(p, RAW_ENCODING, check_plain=False, check_trim=False).outcome is Outcome.CORRECT

def test_ideographic_space_is_trailing_whitespace(tmp_path):
    p = _write(tmp_path, "abc\u3000\n".encode("utf-8"))
    r = classify_file(p, "utf-8")
    assert r.outcome is Outcome.TRAILING_WHITESPACE
    assert r.bad_char is None

def test_decoded_code_point_reported(tmp_path):
    p = _write(tmp_path, "caf\u00e9\n".encode("utf-8"))
    r = classify_file(p, "UTF-8")
    assert r.outcome is Outcome.INVALID_CHARACTER
    assert r.bad_char == 0xE9

def test_undecodable_input_becomes_replacement_character(tmp_path):
    p = _write(tmp_path, b"ok\xff\n")
    r = classify_file(p, "utf-8")
    assert r.bad_char == 0xFFFD

def test_local_encoding_reads_ascii(tmp_path):
    p = _write(tmp_path, b"hello\r\nworld\n")
    assert classify_file(p, LOCAL_ENCODING).outcome is Outcome.CORRECT

@pytest.mark.parametrize("name", ["no-such-charset", "base64"])
def test_unsupported_encoding(tmp_path, name):
    p = _write(tmp_path, b"abc\n")
    r = classify_file(p, name)
    assert r.outcome is Outcome.ENCODING_ERROR
    with pytest.raises(UnsupportedEncoding):
        resolve_encoding(name)

def test_resolve_sentinels():
    assert resolve_encoding(RAW_ENCODING) is None
    assert resolve_encoding(LOCAL_ENCODING)
    assert resolve_encoding("Latin-1") == "iso8859-1"

def test_missing_file_is_io_error(tmp_path):
    r = classify_file(tmp_path / "gone.txt", RAW_ENCODING)
    assert r.outcome is Outcome.IO_ERROR
    assert r.message
    assert r.is_error

def test_cancelled_before_reading(tmp_path):
    p = _write(tmp_path, b"abc \n")
    cancel = threading.Event()
    cancel.set()
    r = classify_file(p, RAW_ENCODING, cancel=cancel)
    assert r.outcome is Outcome.CANCELLED
    assert not r.is_error
    assert not r.is_correct

def test_cancelled_after_first_block(tmp_path, monkeypatch):
    p = _write(tmp_path, b"clean\n" * READ_BLOCK_SIZE)
    cancel = threading.Event()
    real_feed = UnitScanner.feed

    def feed_then_cancel(self, units):
        done = real_feed(self, units)
        cancel.set()
        return done

    monkeypatch.setattr(UnitScanner, "feed", feed_then_cancel)
    r = classify_file(p, RAW_ENCODING, cancel=cancel)
    assert r.outcome is Outcome.CANCELLED
    assert not r.is_error
    assert not r.is_correct

def test_repeated_classification_is_stable(tmp_path):
    data = b"abc \n\xff\n"
    p = _write(tmp_path, data)
    first = classify_file(p, RAW_ENCODING)
    second = classify_file(p, RAW_ENCODING)
    assert first == second
    assert p.read_bytes() == data

def test_scanner_stops_once_both_found():
    s = UnitScanner(check_plain=True, check_trim=True)
    assert s.feed(b"a \n\x80") is True
    assert s.done
    assert s.feed(b"more") is True

def test_scanner_empty_input_is_correct():
    s = UnitScanner(check_plain=True, check_trim=True)
    assert s.feed(b"") is False
    s.finish()
    assert s.outcome() is Outcome.CORRECT
