"""Errors and diagnostics for tlox.

Scan and parse errors are collected rather than raised out of the
front end, so a single pass reports every independent defect in a
source file. Runtime failures are raised by the interpreter and caught
at the top-level statement boundary. All diagnostics go through an
:class:`ErrorReporter`, which writes them to standard error.
"""

from __future__ import annotations

import sys
from typing import Any, List, Optional, TextIO

from termcolor import colored

from .tokens import Token, TokenType


class LoxError(Exception):
    """Base class for every tlox error."""


class ScanError(LoxError):
    def __init__(self, line: int, message: str):
        super().__init__(f"[line {line}] Error: {message}")
        self.line = line
        self.message = message


class ParseError(LoxError):
    def __init__(self, token: Token, message: str):
        if token.type == TokenType.EOF:
            where = 'at end'
        else:
            where = f"at '{token.lexeme}'"
        super().__init__(f"[line {token.line}] Error {where}: {message}")
        self.token = token
        self.message = message


class RuntimeFailure(LoxError):
    """Exception type used to propagate tlox runtime errors."""
    def __init__(self, token: Optional[Token], message: str):
        if token is None:
            text = f"Runtime error: {message}"
        else:
            text = f"[line {token.line}] Runtime error at '{token.lexeme}': {message}"
        super().__init__(text)
        self.token = token
        self.message = message


class DomainError(RuntimeFailure):
    """An operator was applied outside the values it is defined for."""


class ExitDirective(LoxError):
    """Request to terminate the host process with a specific status."""
    def __init__(self, code: int, reason: str = ''):
        super().__init__(reason or f"exit with status {code}")
        self.code = code


class ReturnSignal:
    """Pending return value unwinding towards the enclosing call."""
    __slots__ = ('value',)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"


class ErrorReporter:
    """Formats diagnostics, writes them to a stream and remembers them."""
    ERROR = 'red'

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self.errors: List[LoxError] = []
        self.had_error = False
        self.had_runtime_error = False

    @property
    def stream(self) -> TextIO:
        # resolved lazily so pytest's capsys sees the writes
        return self._stream if self._stream is not None else sys.stderr

    def report(self, error: LoxError) -> None:
        if isinstance(error, RuntimeFailure):
            self.had_runtime_error = True
        else:
            self.had_error = True
        self.errors.append(error)
        tag = colored('error:', ErrorReporter.ERROR, attrs=['bold'])
        print(f"{tag} {error}", file=self.stream)

    def reset(self) -> None:
        self.errors = []
        self.had_error = False
        self.had_runtime_error = False
