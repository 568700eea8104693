# tests/test_streaming/test_range_resolver.py

import pytest

from app.core.exceptions import RangeNotSatisfiableException
from app.services.range_resolver import ByteRange, resolve_range

SIZE = 1000


# ─────────────────────────────────────────────────────────────
# ✅ No range → full body
# ─────────────────────────────────────────────────────────────
@pytest.mark.parametrize("header", [None, "", "   ", "bytes=", "bytes= , "])
def test_absent_or_empty_header_means_full_body(header):
    assert resolve_range(header, SIZE) is None


# ─────────────────────────────────────────────────────────────
# ✅ Satisfiable forms
# ─────────────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "header, expected",
    [
        ("bytes=0-499", ByteRange(0, 499)),
        ("bytes=500-", ByteRange(500, 999)),
        ("bytes=-200", ByteRange(800, 999)),
        ("bytes=999-999", ByteRange(999, 999)),
        ("bytes=0-999", ByteRange(0, 999)),
        ("BYTES=10-19", ByteRange(10, 19)),
        ("bytes= 5 - 9 ", ByteRange(5, 9)),
    ],
)
def test_satisfiable_ranges(header, expected):
    assert resolve_range(header, SIZE) == expected


def test_suffix_longer_than_file_clamps_to_whole_file():
    assert resolve_range("bytes=-5000", SIZE) == ByteRange(0, 999)


def test_first_of_multiple_ranges_is_served():
    assert resolve_range("bytes=0-9, 20-29", SIZE) == ByteRange(0, 9)


def test_length_and_content_range():
    r = resolve_range("bytes=100-199", SIZE)
    assert r.length == 100
    assert r.content_range(SIZE) == "bytes 100-199/1000"


# ─────────────────────────────────────────────────────────────
# ❌ Rejections (416)
# ─────────────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "header",
    [
        "bytes=1000-",      # start beyond last byte
        "bytes=0-1000",     # end beyond last byte
        "bytes=500-100",    # inverted
        "bytes=-0",         # empty suffix
        "bytes=abc-def",
        "bytes=1-2-3",
        "bytes=--5",
        "bytes=0-9, x-y",   # one malformed spec poisons the header
        "items=0-10",       # other unit
        "0-10",
        "bytes=١-٢",        # non-ASCII digits
    ],
)
def test_unsatisfiable_or_malformed_headers_raise_416(header):
    with pytest.raises(RangeNotSatisfiableException) as exc:
        resolve_range(header, SIZE)
    assert exc.value.status_code == 416
    assert exc.value.headers["Content-Range"] == f"bytes */{SIZE}"


def test_any_range_against_empty_file_is_rejected():
    for header in ("bytes=0-", "bytes=-1", "bytes=0-0"):
        with pytest.raises(RangeNotSatisfiableException):
            resolve_range(header, 0)


def test_resolved_range_is_always_within_bounds():
    for header in ("bytes=0-", "bytes=-1", "bytes=-999999", "bytes=998-", "bytes=3-7"):
        r = resolve_range(header, SIZE)
        assert 0 <= r.start <= r.end <= SIZE - 1
