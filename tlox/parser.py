"""Recursive-descent parser for the tlox language.

The parser owns a :class:`~tlox.scanner.Scanner` and turns its token
list into a list of statements. Expressions are parsed by precedence
climbing, one method per level, lowest precedence first::

    assignment -> or -> and -> equality -> comparison -> term
               -> factor -> unary -> call -> primary

``for`` loops are desugared here into ``while`` loops wrapped in
blocks, so the interpreter never sees them.

Error recovery is panic mode, modelled as a two-state machine
(:class:`ParserState`). A grammar violation raises :class:`ParseError`
which is caught in :meth:`Parser.declaration`; the parser reports it,
switches to ``RECOVERING`` and discards tokens until a statement
boundary, then returns to ``NORMAL`` and carries on. One pass over a
malformed file therefore reports every independent error and still
returns all the statements that parsed cleanly.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from .ast import (
    Assign, Binary, Block, Call, DumpStmt, Expr, ExprStmt, FuncDecl, Grouping,
    IfStmt, Literal, Logical, PrintStmt, ReturnStmt, Stmt, Unary, VarDecl,
    Variable, WhileStmt,
)
from .errors import ErrorReporter, ParseError
from .scanner import Scanner
from .tokens import Token, TokenType, eof_token
from .values import EMPTY

# tokens that can begin a statement; recovery stops in front of them
SYNCHRONIZE_TOKEN_TYPES = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})


class ParserState(Enum):
    NORMAL = 'normal'
    RECOVERING = 'recovering'


class Parser:
    def __init__(self, reporter: Optional[ErrorReporter] = None):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.scanner = Scanner(self.reporter)
        self.current = 0
        self.statements: List[Stmt] = []
        self.state = ParserState.NORMAL
        self.errors: List[ParseError] = []

    @classmethod
    def from_tokens(cls, tokens: Sequence[Token], reporter: Optional[ErrorReporter] = None) -> 'Parser':
        """Build a parser over an already scanned token list."""
        parser = cls(reporter)
        parser.scanner.tokens.extend(t for t in tokens if t.type != TokenType.EOF)
        if tokens:
            parser.scanner.line = tokens[-1].line
        return parser

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    @property
    def tokens(self) -> List[Token]:
        return self.scanner.tokens

    # Loading

    def load(self, source: str) -> List[Stmt]:
        """Scan and parse another chunk of source.

        Tokens and statements accumulate across calls; only the statements
        parsed from this chunk are returned.
        """
        self.scanner.load(source)
        statements = self.parse()
        self.statements.extend(statements)
        return statements

    def load_file(self, path) -> List[Stmt]:
        source = Path(path).read_text(encoding='utf-8')
        return self.load(source)

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # Declarations and statements

    def declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.FUN):
                return self.function()
            if self.match(TokenType.VAR):
                return self.var_declaration()
            if self.match(TokenType.DUMP):
                return self.dump_statement()
            return self.statement()
        except ParseError as exc:
            self.recover(exc)
            return None

    def function(self) -> FuncDecl:
        name = self.consume(TokenType.IDENTIFIER, 'Expect function name.')
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after function name.")
        params: List[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            params.append(self.consume(TokenType.IDENTIFIER, 'Expect parameter name.'))
            while self.match(TokenType.COMMA):
                params.append(self.consume(TokenType.IDENTIFIER, 'Expect parameter name.'))
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self.consume(TokenType.LEFT_BRACE, "Expect '{' before function body.")
        body = self.block()
        return FuncDecl(name, params, body)

    def var_declaration(self) -> VarDecl:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDecl(name, initializer)

    def dump_statement(self) -> DumpStmt:
        keyword = self.previous()
        self.consume(TokenType.SEMICOLON, "Expect ';' after dump.")
        return DumpStmt(keyword)

    def statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.block())
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        return self.expression_statement()

    def print_statement(self) -> PrintStmt:
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStmt(value)

    def block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def if_statement(self) -> IfStmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.statement()
        return IfStmt(condition, then_branch, else_branch)

    def while_statement(self) -> WhileStmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.statement()
        return WhileStmt(condition, body)

    def for_statement(self) -> Stmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")
        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        # for (init; cond; incr) body  =>  { init; while (cond) { body; incr; } }
        body = self.statement()
        if increment is not None:
            body = Block([body, ExprStmt(increment)])
        if condition is None:
            condition = Literal(True)
        body = WhileStmt(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    def return_statement(self) -> ReturnStmt:
        keyword = self.previous()
        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ReturnStmt(keyword, value)

    def expression_statement(self) -> ExprStmt:
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExprStmt(expr)

    # Expressions

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            raise ParseError(equals, 'Invalid assignment target.')
        return expr

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            right = self.logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            right = self.equality()
            expr = Logical(expr, operator, right)
        return expr

    def equality(self) -> Expr:
        expr = self.comparison()
        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.comparison()
            expr = Binary(expr, operator, right)
        return expr

    def comparison(self) -> Expr:
        expr = self.term()
        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self.previous()
            right = self.term()
            expr = Binary(expr, operator, right)
        return expr

    def term(self) -> Expr:
        expr = self.factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.factor()
            expr = Binary(expr, operator, right)
        return expr

    def factor(self) -> Expr:
        expr = self.unary()
        while self.match(TokenType.SLASH, TokenType.STAR, TokenType.EXPONENT):
            operator = self.previous()
            right = self.unary()
            expr = Binary(expr, operator, right)
        return expr

    def unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            arguments.append(self.expression())
            while self.match(TokenType.COMMA):
                arguments.append(self.expression())
        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, arguments)

    def primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(EMPTY)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise ParseError(self.peek(), 'Expect expression.')

    # Error recovery

    def recover(self, error: ParseError) -> None:
        self.state = ParserState.RECOVERING
        self.errors.append(error)
        self.reporter.report(error)
        self.synchronize()
        self.state = ParserState.NORMAL

    def synchronize(self) -> None:
        """Discard tokens until just past a ';' or in front of a statement keyword."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in SYNCHRONIZE_TOKEN_TYPES:
                return
            self.advance()

    # Token cursor

    def consume(self, kind: TokenType, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise ParseError(self.peek(), message)

    def match(self, *kinds: TokenType) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def check(self, kind: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == kind

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        if self.current >= len(self.scanner.tokens):
            return eof_token(self.scanner.line)
        return self.scanner.tokens[self.current]

    def previous(self) -> Token:
        return self.scanner.tokens[self.current - 1]


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Parse tlox source code into a list of statements using a fresh parser."""
    parser = Parser(reporter)
    return parser.load(source)


def parse(tokens: Sequence[Token], reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Parse an already scanned token list."""
    return Parser.from_tokens(tokens, reporter).parse()
