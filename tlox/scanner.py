"""Scanner for the tlox language.

Converts source text into a list of :class:`~tlox.tokens.Token`. The
scanner makes a single pass over its input and never stops early:
unknown characters, unterminated strings and unterminated block
comments are reported and scanning carries on with the next character,
so all lexical errors of a file surface in one run.

``load`` may be called repeatedly. Source text, tokens and the line
counter accumulate across calls, which is how the interactive shell
feeds one line at a time into a long-lived scanner.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .errors import ErrorReporter, ScanError
from .tokens import KEYWORDS, Token, TokenType
from .values import EMPTY, INT_MAX

SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '^': TokenType.EXPONENT,
}

# first char -> (second char, two-char kind, one-char kind)
TWO_CHAR_TOKENS = {
    '*': ('*', TokenType.EXPONENT, TokenType.STAR),
    '!': ('=', TokenType.BANG_EQUAL, TokenType.BANG),
    '=': ('=', TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    '<': ('=', TokenType.LESS_EQUAL, TokenType.LESS),
    '>': ('=', TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


class Scanner:
    def __init__(self, reporter: Optional[ErrorReporter] = None, keep_comments: bool = False):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.keep_comments = keep_comments
        self.source = ''
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1
        self.had_error = False

    def load(self, source: str) -> List[Token]:
        """Scan ``source`` and append its tokens. Returns the tokens added by this call."""
        first = len(self.tokens)
        self.source += source
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        return self.tokens[first:]

    def scan_token(self) -> None:
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
        elif c in TWO_CHAR_TOKENS:
            second, double, single = TWO_CHAR_TOKENS[c]
            self.add_token(double if self.match(second) else single)
        elif c == '/':
            if self.match('/'):
                self.line_comment()
            elif self.match('*'):
                self.block_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif c == '"' or c == '\'':
            self.string(c)
        elif c in ' \r\t':
            pass
        elif c == '\n':
            self.line += 1
        elif is_digit(c):
            self.number()
        elif c.isalpha():
            self.identifier()
        else:
            self.error(self.line, f"Unexpected character: {c!r}")

    def line_comment(self) -> None:
        while self.peek() != '\n' and not self.is_at_end():
            self.advance()
        if self.keep_comments:
            self.add_token(TokenType.COMMENT, self.source[self.start + 2:self.current])

    def block_comment(self) -> None:
        start_line = self.line
        while not (self.peek() == '*' and self.peek_next() == '/'):
            if self.is_at_end():
                self.error(start_line, 'Unterminated block comment.')
                return
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        self.current += 2
        if self.keep_comments:
            self.add_token(TokenType.BLOCK_COMMENT, self.source[self.start + 2:self.current - 2])

    def string(self, quote: str) -> None:
        start_line = self.line
        while self.peek() != quote and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            self.error(start_line, 'Unterminated string.')
            return
        self.advance()  # closing quote
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self) -> None:
        while is_digit(self.peek()):
            self.advance()
        is_float = False
        # a trailing '.' without digits is left for the DOT token
        if self.peek() == '.' and is_digit(self.peek_next()):
            is_float = True
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        text = self.source[self.start:self.current]
        if is_float:
            self.add_token(TokenType.NUMBER, float(text))
            return
        value = int(text)
        if value > INT_MAX:
            self.error(self.line, f"Integer literal {text} is out of range.")
            value = 0
        self.add_token(TokenType.NUMBER, value)

    def identifier(self) -> None:
        while self.peek().isalnum():
            self.advance()
        text = self.source[self.start:self.current]
        kind = KEYWORDS.get(text)
        if kind is not None:
            self.add_token(kind)
        else:
            self.add_token(TokenType.IDENTIFIER, text)

    def add_token(self, kind: TokenType, literal: Any = EMPTY) -> None:
        text = self.source[self.start:self.current]
        self.tokens.append(Token(kind, text, literal, self.line))

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def error(self, line: int, message: str) -> None:
        self.had_error = True
        self.reporter.report(ScanError(line, message))


def scan(source: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    """Scan a complete source text with a fresh scanner."""
    scanner = Scanner(reporter)
    return scanner.load(source)
