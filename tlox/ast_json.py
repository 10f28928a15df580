"""JSON serialization/deserialization for the tlox AST.

This module converts between tlox AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Tokens are kept in
full so diagnostics raised while running a loaded AST still point at
the right line. Runtime values are tagged with their tlox type, because
JSON alone cannot tell ``1`` from ``1.0`` once parsed back or express
the empty value.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .ast import (
    Assign,
    Binary,
    Block,
    Call,
    DumpStmt,
    EmptyExpr,
    ExprStmt,
    FuncDecl,
    Grouping,
    IfStmt,
    Literal,
    Logical,
    PrintStmt,
    ReturnStmt,
    Unary,
    VarDecl,
    Variable,
    WhileStmt,
)
from .tokens import Token, TokenType
from .values import EMPTY, Empty, type_name


def value_to_obj(value: Any) -> Dict[str, Any]:
    if isinstance(value, Empty):
        return {"__value__": "Empty"}
    if isinstance(value, float) and value != value:
        return {"__value__": "Float", "value": "NaN"}
    return {"__value__": type_name(value), "value": value}


def value_from_obj(o: Dict[str, Any]) -> Any:
    kind = o["__value__"]
    if kind == "Empty":
        return EMPTY
    if kind == "Boolean":
        return bool(o["value"])
    if kind == "Integer":
        return int(o["value"])
    if kind == "Float":
        return float(o["value"])
    if kind == "String":
        return str(o["value"])
    raise ValueError(f"unknown value kind {kind!r}")


def token_to_obj(t: Token) -> Dict[str, Any]:
    return {
        "__token__": t.type.name,
        "lexeme": t.lexeme,
        "literal": value_to_obj(t.literal),
        "line": t.line,
    }


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(TokenType[o["__token__"]], o["lexeme"], value_from_obj(o["literal"]), o["line"])


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, Token):
        return token_to_obj(node)

    # Expressions
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value)}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": token_to_obj(node.name)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": token_to_obj(node.operator), "right": ast_to_obj(node.right)}
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Logical):
        return {
            "type": "Logical",
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Assign):
        return {"type": "Assign", "name": token_to_obj(node.name), "value": ast_to_obj(node.value)}
    if isinstance(node, Call):
        return {
            "type": "Call",
            "callee": ast_to_obj(node.callee),
            "paren": token_to_obj(node.paren),
            "arguments": [ast_to_obj(a) for a in node.arguments],
        }
    if isinstance(node, EmptyExpr):
        return {"type": "EmptyExpr"}

    # Statements
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, VarDecl):
        return {"type": "VarDecl", "name": token_to_obj(node.name), "initializer": ast_to_obj(node.initializer)}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, WhileStmt):
        return {"type": "WhileStmt", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, FuncDecl):
        return {
            "type": "FuncDecl",
            "name": token_to_obj(node.name),
            "params": [token_to_obj(p) for p in node.params],
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "keyword": token_to_obj(node.keyword), "value": ast_to_obj(node.value)}
    if isinstance(node, DumpStmt):
        return {"type": "DumpStmt", "keyword": token_to_obj(node.keyword)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, list):
        return [ast_from_obj(x) for x in obj]
    if not isinstance(obj, dict):
        raise TypeError(f"Unexpected JSON value in AST: {obj!r}")
    if "__token__" in obj:
        return token_from_obj(obj)

    t = obj.get("type")
    if t == "Literal":
        return Literal(value_from_obj(obj["value"]))
    if t == "Variable":
        return Variable(token_from_obj(obj["name"]))
    if t == "Grouping":
        return Grouping(ast_from_obj(obj["expression"]))
    if t == "Unary":
        return Unary(token_from_obj(obj["operator"]), ast_from_obj(obj["right"]))
    if t == "Binary":
        return Binary(ast_from_obj(obj["left"]), token_from_obj(obj["operator"]), ast_from_obj(obj["right"]))
    if t == "Logical":
        return Logical(ast_from_obj(obj["left"]), token_from_obj(obj["operator"]), ast_from_obj(obj["right"]))
    if t == "Assign":
        return Assign(token_from_obj(obj["name"]), ast_from_obj(obj["value"]))
    if t == "Call":
        args: List[Any] = [ast_from_obj(a) for a in obj.get("arguments", [])]
        return Call(ast_from_obj(obj["callee"]), token_from_obj(obj["paren"]), args)
    if t == "EmptyExpr":
        return EmptyExpr()
    if t == "ExprStmt":
        return ExprStmt(ast_from_obj(obj["expression"]))
    if t == "PrintStmt":
        return PrintStmt(ast_from_obj(obj["expression"]))
    if t == "VarDecl":
        return VarDecl(token_from_obj(obj["name"]), ast_from_obj(obj.get("initializer")))
    if t == "Block":
        return Block([ast_from_obj(s) for s in obj.get("statements", [])])
    if t == "IfStmt":
        return IfStmt(ast_from_obj(obj["condition"]), ast_from_obj(obj["then_branch"]), ast_from_obj(obj.get("else_branch")))
    if t == "WhileStmt":
        return WhileStmt(ast_from_obj(obj["condition"]), ast_from_obj(obj["body"]))
    if t == "FuncDecl":
        return FuncDecl(
            token_from_obj(obj["name"]),
            [token_from_obj(p) for p in obj.get("params", [])],
            [ast_from_obj(s) for s in obj.get("body", [])],
        )
    if t == "ReturnStmt":
        return ReturnStmt(token_from_obj(obj["keyword"]), ast_from_obj(obj.get("value")))
    if t == "DumpStmt":
        return DumpStmt(token_from_obj(obj["keyword"]))

    raise ValueError(f"Unknown AST node type: {t}")
