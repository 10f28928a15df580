"""Abstract Syntax Tree (AST) definitions for the tlox language.

The parser builds these nodes from tokens and the interpreter walks
them. Each node exclusively owns its children. Nodes that need to point
back at source (for diagnostics) keep the relevant token rather than a
bare string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .tokens import Token


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Expr(Node):
    pass


@dataclass
class Stmt(Node):
    pass


# Expressions


@dataclass
class Literal(Expr):
    value: Any


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Grouping(Expr):
    expression: Expr


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Logical(Expr):
    left: Expr
    operator: Token  # AND or OR
    right: Expr


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


@dataclass
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used for error locations
    arguments: List[Expr]


@dataclass
class EmptyExpr(Expr):
    pass


# Statements


@dataclass
class ExprStmt(Stmt):
    expression: Expr


@dataclass
class PrintStmt(Stmt):
    expression: Expr


@dataclass
class VarDecl(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass
class Block(Stmt):
    statements: List[Stmt]


@dataclass
class IfStmt(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass
class WhileStmt(Stmt):
    condition: Expr
    body: Stmt


@dataclass
class FuncDecl(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass
class ReturnStmt(Stmt):
    keyword: Token
    value: Optional[Expr]


@dataclass
class DumpStmt(Stmt):
    keyword: Token
