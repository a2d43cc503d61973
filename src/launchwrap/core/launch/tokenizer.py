"""
Argument-file tokenizer.

Splits the text of an ``@argfile`` into launch-line tokens. The dialect is a
small subset of shell quoting as used by JVM argument files:

- whitespace separates tokens; ``""`` produces an empty token
- ``"..."`` quotes text, with ``\\"``, ``\\t``, ``\\n`` and ``\\b`` escapes;
  an escaped quote stays inside the quoted string
- outside quotes a backslash escapes the next character (``\\r``, ``\\t``
  and ``\\b`` expand, anything else is taken literally)
- ``#`` outside quotes starts a comment running to the end of the line;
  the newline ending a comment does not end the token in progress
- a backslash at the end of a line continues the token on the next line;
  leading whitespace of the continued line is skipped and a lone leading
  backslash ends the continuation

Malformed input never raises: an unterminated quote simply runs to the end
of the text.
"""

from __future__ import annotations

_NO_PENDING = -1

_QUOTED_ESCAPES = {"t": "\t", "n": "\n", "b": "\b"}
_BARE_ESCAPES = {"r": "\r", "t": "\t", "b": "\b"}


class _LineTokenizer:
    """Character-level state machine behind :func:`tokenize`."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens: list[str] = []
        self.buffer: list[str] = []
        self.in_quote = False
        self.in_comment = False
        self.in_continuation = False
        self.just_saw_newline = False
        # Set once the current token contained a quoted section, so that ""
        # still yields an (empty) token.
        self.saw_quoted = False
        self.pending_start = _NO_PENDING
        self.pos = 0

    # -- buffer management ---------------------------------------------------

    def _mark_text(self) -> None:
        if self.pending_start == _NO_PENDING:
            self.pending_start = self.pos

    def _flush(self) -> None:
        """Move the pending slice [pending_start, pos) into the buffer."""
        if self.pending_start != _NO_PENDING and self.pending_start < self.pos:
            self.buffer.append(self.text[self.pending_start:self.pos])
            self.just_saw_newline = False
        self.pending_start = _NO_PENDING

    def _append(self, char: str) -> None:
        self._flush()
        self.buffer.append(char)
        self.just_saw_newline = False

    def _end_token(self) -> None:
        self._flush()
        if self.buffer or self.saw_quoted:
            self.tokens.append("".join(self.buffer))
        self.buffer = []
        self.saw_quoted = False
        self.pending_start = _NO_PENDING

    def _peek(self) -> str | None:
        nxt = self.pos + 1
        return self.text[nxt] if nxt < len(self.text) else None

    # -- scanning ------------------------------------------------------------

    def run(self) -> list[str]:
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            self._step(char)
            self.pos += 1
        self._end_token()
        return self.tokens

    def _step(self, char: str) -> None:
        if char == "\n":
            if not self.in_continuation:
                if self.in_comment:
                    # The token in progress resumes on the next line
                    self.in_comment = False
                    self.in_quote = False
                    self.in_continuation = False
                else:
                    self._end_token()
            self.just_saw_newline = True
            return

        if self.in_comment:
            return

        if self.in_continuation:
            if self.just_saw_newline and char == "\\":
                self.just_saw_newline = False
                self.in_continuation = False
                return
            if char.isspace():
                self.just_saw_newline = False
                return
        self.in_continuation = False
        self.just_saw_newline = False

        if self.in_quote:
            self._step_quoted(char)
        else:
            self._step_bare(char)

    def _step_quoted(self, char: str) -> None:
        self._mark_text()
        self.saw_quoted = True
        if char == "\\":
            nxt = self._peek()
            self._flush()
            if nxt is None:
                return
            self.pos += 1
            if nxt == "\n":
                self.in_continuation = True
                self.just_saw_newline = True
                return
            self.buffer.append(_QUOTED_ESCAPES.get(nxt, nxt))
            return
        if char == '"':
            self._flush()
            self.in_quote = False

    def _step_bare(self, char: str) -> None:
        if char == "#":
            self._flush()
            self.in_comment = True
        elif char == '"':
            self._flush()
            self.in_quote = True
            self.saw_quoted = True
        elif char == "\\":
            nxt = self._peek()
            if nxt is None:
                self._flush()
                return
            if nxt == "\n":
                # The newline itself is consumed by the next step, which
                # sees in_continuation and only records the line break.
                self._flush()
                self.in_continuation = True
                return
            self._append(_BARE_ESCAPES.get(nxt, nxt))
            self.pos += 1
        elif char.isspace():
            self._end_token()
        else:
            self._mark_text()


def tokenize(text: str) -> list[str]:
    """
    Split argument-file text into tokens.

    Args:
        text: Full text of the argument file (lines separated by ``\\n``)

    Returns:
        Tokens in order of appearance

    Example:
        >>> tokenize('"a b" c\\\\ d')
        ['a b', 'c d']
        >>> tokenize('-cp lib.jar  # classpath')
        ['-cp', 'lib.jar']
    """
    return _LineTokenizer(text).run()


__all__ = ["tokenize"]
