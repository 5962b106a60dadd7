# gpsd_link/tests/protocol/test_framing.py
from __future__ import annotations

import logging

from gpsd_link.protocol.framing import LineFramer


def drain(framer: LineFramer) -> list[bytes]:
    out = []
    while True:
        line = framer.get_line()
        if line is None:
            return out
        out.append(line)


def test_line_split_across_feeds_is_reassembled():
    f = LineFramer()
    f.feed(b'{"class":"TP')
    assert f.get_line() is None
    assert f.pending == len(b'{"class":"TP')

    f.feed(b'V","mode":1}\n')
    assert drain(f) == [b'{"class":"TPV","mode":1}']
    assert f.pending == 0


def test_multiple_lines_in_one_chunk_keep_order():
    f = LineFramer()
    f.feed(b"a\nb\nc")
    assert drain(f) == [b"a", b"b"]
    f.feed(b"\n")
    assert drain(f) == [b"c"]


def test_crlf_terminator_is_stripped():
    f = LineFramer()
    f.feed(b"one\r\ntwo\n")
    assert drain(f) == [b"one", b"two"]


def test_empty_lines_are_returned_as_empty():
    f = LineFramer()
    f.feed(b"\n\nx\n")
    assert drain(f) == [b"", b"", b"x"]


def test_overlong_partial_line_is_dropped(caplog):
    f = LineFramer(max_line=8)
    with caplog.at_level(logging.WARNING):
        f.feed(b"0123456789")
        assert f.get_line() is None

    assert f.pending == 0
    assert f.discarding is True
    assert any("exceeds" in r.getMessage() for r in caplog.records)

    # the tail of the dropped line is skipped up to its terminator
    f.feed(b"more-of-the-same-line")
    assert f.get_line() is None
    f.feed(b"tail\nok\n")
    assert drain(f) == [b"ok"]
    assert f.discarding is False


def test_reset_clears_discarding_state():
    f = LineFramer(max_line=4)
    f.feed(b"0123456789")
    assert f.get_line() is None
    f.reset()

    f.feed(b"next\n")
    assert drain(f) == [b"next"]


def test_reset_returns_partial_line():
    f = LineFramer()
    f.feed(b"done\npartial")
    assert drain(f) == [b"done"]
    assert f.reset() == b"partial"
    assert f.pending == 0
    assert f.get_line() is None
