"""Single-character input with pushback and an optional interactive prompt."""

from __future__ import annotations

from typing import TextIO

EOF = ""  # what TextIO.read(1) returns at end of stream

DEFAULT_PROMPT = ">>> "


class CharSource:
    """Pull characters one at a time from a text stream.

    When an ``output`` stream is given the source is interactive: the prompt
    is written once up front and again every time ``next()`` consumes a
    newline. The prompt is flushed before control returns, so it is visible
    before the following read blocks.
    """

    def __init__(
        self,
        stream: TextIO,
        output: TextIO | None = None,
        prompt: str = DEFAULT_PROMPT,
    ) -> None:
        self._stream = stream
        self._output = output
        self._prompt = prompt
        self._pushed: list[str] = []
        if self._output is not None:
            self._write_prompt()

    @property
    def interactive(self) -> bool:
        return self._output is not None

    def _write_prompt(self) -> None:
        assert self._output is not None
        self._output.write(self._prompt)
        self._output.flush()

    def _read(self) -> str:
        if self._pushed:
            return self._pushed.pop()
        return self._stream.read(1)

    def next(self) -> str:
        """Consume and return the next character, or EOF."""
        ch = self._read()
        if ch == "\n" and self._output is not None:
            self._write_prompt()
        return ch

    def peek(self) -> str:
        """Return the next character without consuming it."""
        ch = self._read()
        self.pushback(ch)
        return ch

    def pushback(self, ch: str) -> None:
        """Return ch to the front of the stream."""
        self._pushed.append(ch)
