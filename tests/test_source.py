"""Test the character source: pushback and interactive prompting."""

from __future__ import annotations

import io

from fort.source import EOF, CharSource


class RecordingStream:
    """Input stream that logs each read into a shared event list."""

    def __init__(self, text: str, events: list[str]) -> None:
        self._buf = io.StringIO(text)
        self._events = events

    def read(self, size: int = -1) -> str:
        ch = self._buf.read(size)
        self._events.append(f"read {ch!r}")
        return ch


class RecordingOutput:
    """Output sink that logs writes and flushes into a shared event list."""

    def __init__(self, events: list[str]) -> None:
        self._events = events

    def write(self, text: str) -> int:
        self._events.append(f"write {text!r}")
        return len(text)

    def flush(self) -> None:
        self._events.append("flush")


class TestReading:
    def test_next_in_order(self):
        src = CharSource(io.StringIO("AB"))
        assert src.next() == "A"
        assert src.next() == "B"
        assert src.next() == EOF

    def test_eof_repeats(self):
        src = CharSource(io.StringIO(""))
        assert src.next() == EOF
        assert src.next() == EOF

    def test_peek_does_not_consume(self):
        src = CharSource(io.StringIO("AB"))
        assert src.peek() == "A"
        assert src.peek() == "A"
        assert src.next() == "A"
        assert src.peek() == "B"

    def test_peek_at_eof(self):
        src = CharSource(io.StringIO(""))
        assert src.peek() == EOF
        assert src.next() == EOF

    def test_pushback(self):
        src = CharSource(io.StringIO("B"))
        src.pushback("A")
        assert src.next() == "A"
        assert src.next() == "B"

    def test_pushback_after_next(self):
        src = CharSource(io.StringIO("XY"))
        ch = src.next()
        src.pushback(ch)
        assert src.next() == "X"
        assert src.next() == "Y"


class TestPrompt:
    def test_not_interactive_by_default(self):
        src = CharSource(io.StringIO("A\n"))
        assert not src.interactive
        assert src.next() == "A"
        assert src.next() == "\n"

    def test_initial_prompt(self):
        out = io.StringIO()
        src = CharSource(io.StringIO(""), output=out)
        assert src.interactive
        assert out.getvalue() == ">>> "

    def test_prompt_after_newline(self):
        out = io.StringIO()
        src = CharSource(io.StringIO("A\nB"), output=out)
        src.next()
        assert out.getvalue() == ">>> "
        src.next()
        assert out.getvalue() == ">>> >>> "
        src.next()
        assert out.getvalue() == ">>> >>> "

    def test_peek_never_prompts(self):
        out = io.StringIO()
        src = CharSource(io.StringIO("\n"), output=out)
        src.peek()
        src.peek()
        assert out.getvalue() == ">>> "
        src.next()
        assert out.getvalue() == ">>> >>> "

    def test_custom_prompt(self):
        out = io.StringIO()
        src = CharSource(io.StringIO("\n"), output=out, prompt="? ")
        src.next()
        assert out.getvalue() == "? ? "

    def test_prompt_flushed_before_next_read(self):
        events: list[str] = []
        src = CharSource(RecordingStream("\nA", events), output=RecordingOutput(events))
        src.next()
        src.next()
        assert events == [
            "write '>>> '",
            "flush",
            "read '\\n'",
            "write '>>> '",
            "flush",
            "read 'A'",
        ]
