"""Tree-walking interpreter for the tlox language.

The interpreter executes the statement list produced by
:class:`~tlox.parser.Parser`. It keeps two pieces of state:

* an :class:`~tlox.environment.Environment`, the stack of scope frames
  holding variables, and
* a flat, global function table. Functions do not capture the scope
  they are declared in; only their parameters are bound when called.

Runtime failures (type mismatches, undefined functions, ...) are raised
as :class:`~tlox.errors.RuntimeFailure` and caught at the top-level
statement boundary, so one failing statement does not stop the ones
after it. ``return`` does not raise; :meth:`Interpreter.execute` hands a
:class:`~tlox.errors.ReturnSignal` back up through blocks and loops to
the enclosing call.
"""

from __future__ import annotations

import pprint
import sys
from typing import Any, Dict, List, Optional

from .ast import (
    Assign, Binary, Block, Call, DumpStmt, EmptyExpr, Expr, ExprStmt, FuncDecl,
    Grouping, IfStmt, Literal, Logical, PrintStmt, ReturnStmt, Stmt, Unary,
    VarDecl, Variable, WhileStmt,
)
from .environment import Environment
from .errors import DomainError, ErrorReporter, ReturnSignal, RuntimeFailure
from .functions import FunctionDef
from .parser import Parser
from .tokens import Token, TokenType
from .values import (
    EMPTY, add, compare, divide, is_equal, is_truthy, multiply, negate, power,
    subtract, to_string,
)

ARITHMETIC = {
    TokenType.PLUS: add,
    TokenType.MINUS: subtract,
    TokenType.STAR: multiply,
    TokenType.SLASH: divide,
    TokenType.EXPONENT: power,
}

# nested calls allowed before a call fails with "Maximum recursion depth exceeded."
MAX_CALL_DEPTH = 2000
# upper bound on Python frames spent per tlox call, nested blocks and loops included
FRAMES_PER_CALL = 12

COMPARISONS = {
    TokenType.GREATER,
    TokenType.GREATER_EQUAL,
    TokenType.LESS,
    TokenType.LESS_EQUAL,
}


class Interpreter:
    """Core interpreter that executes tlox statements."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 reporter: Optional[ErrorReporter] = None, max_call_depth: int = MAX_CALL_DEPTH):
        self.environment = Environment()
        self.functions: Dict[str, FunctionDef] = {}
        self.max_call_depth = max_call_depth
        self.call_depth = 0
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: List[Stmt]) -> None:
        """Execute top-level statements in order, isolating runtime failures per statement."""
        self.ensure_recursion_limit()
        for stmt in statements:
            self.debug(f"execute {type(stmt).__name__}")
            try:
                result = self.execute(stmt)
            except RuntimeFailure as ex:
                self.runtime_error(ex)
                continue
            except RecursionError:
                self.runtime_error(RuntimeFailure(None, 'Maximum recursion depth exceeded.'))
                continue
            if isinstance(result, ReturnSignal):
                self.debug(f"return outside of a function discarded {result.value!r}")

    def run(self, statements: List[Stmt]) -> None:
        try:
            self.interpret(statements)
        finally:
            self.close()

    def ensure_recursion_limit(self) -> None:
        """Make room on the Python stack for max_call_depth nested tlox calls."""
        needed = self.max_call_depth * FRAMES_PER_CALL + 1000
        if sys.getrecursionlimit() < needed:
            sys.setrecursionlimit(needed)

    def get_var(self, name: str) -> Any:
        return self.environment.lookup(name)

    def runtime_error(self, error: RuntimeFailure) -> None:
        self.debug(f"runtime failure: {error}")
        self.reporter.report(error)

    # Statements
    def execute_block(self, statements: List[Stmt], frame: Optional[Dict[str, Any]] = None) -> Optional[ReturnSignal]:
        self.environment.push(frame)
        try:
            for stmt in statements:
                result = self.execute(stmt)
                # propagate return signals
                if isinstance(result, ReturnSignal):
                    return result
            return None
        finally:
            self.environment.pop()

    def execute(self, node: Stmt) -> Optional[ReturnSignal]:
        if isinstance(node, ExprStmt):
            try:
                self.evaluate(node.expression)
            except RuntimeFailure as ex:
                self.runtime_error(ex)
            return None
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expression)
            print(to_string(value))
            return None
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer) if node.initializer is not None else EMPTY
            self.environment.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme} = {value!r} (depth {self.environment.depth})")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements)
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {cond!r} -> {truthy}")
            if truthy:
                return self.execute(node.then_branch)
            if node.else_branch is not None:
                return self.execute(node.else_branch)
            return None
        if isinstance(node, WhileStmt):
            while True:
                cond = self.evaluate(node.condition)
                if self.debug_level >= 3:
                    self.debug(f"while condition {cond!r}")
                if not is_truthy(cond):
                    break
                res = self.execute(node.body)
                if isinstance(res, ReturnSignal):
                    return res
            return None
        if isinstance(node, FuncDecl):
            name = node.name.lexeme
            self.functions[name] = FunctionDef(name, [param.lexeme for param in node.params], node.body)
            if self.debug_level >= 2:
                self.debug(f"define function {self.functions[name]!r}")
            return None
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value) if node.value is not None else EMPTY
            return ReturnSignal(value)
        if isinstance(node, DumpStmt):
            self.dump()
            return None
        raise RuntimeFailure(None, f"cannot execute {type(node).__name__}")

    def dump(self) -> None:
        state = {
            'scopes': self.environment.snapshot(),
            'functions': {name: func.params for name, func in self.functions.items()},
        }
        text = pprint.pformat(state)
        print(text, file=sys.stderr)
        self.debug(f"dump\n{text}")

    # Expressions
    def evaluate(self, node: Expr) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Variable):
            return self.environment.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            self.environment.assign(node.name.lexeme, value)
            return value
        if isinstance(node, Logical):
            left = self.evaluate(node.left)
            # short-circuit: the deciding operand is the result
            if node.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right)
        if isinstance(node, Unary):
            operand = self.evaluate(node.right)
            if node.operator.type == TokenType.BANG:
                return not is_truthy(operand)
            if node.operator.type == TokenType.MINUS:
                try:
                    return negate(operand)
                except ValueError as e:
                    raise DomainError(node.operator, str(e))
                except (TypeError, OverflowError) as e:
                    raise RuntimeFailure(node.operator, str(e))
            raise RuntimeFailure(node.operator, f"unsupported unary operator {node.operator.lexeme}")
        if isinstance(node, Binary):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Call):
            return self.call_function(node)
        if isinstance(node, EmptyExpr):
            return EMPTY
        raise RuntimeFailure(None, f"cannot evaluate {type(node).__name__}")

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        kind = operator.type
        if kind == TokenType.EQUAL_EQUAL:
            return is_equal(a, b)
        if kind == TokenType.BANG_EQUAL:
            return not is_equal(a, b)
        try:
            if kind in ARITHMETIC:
                return ARITHMETIC[kind](a, b)
            if kind in COMPARISONS:
                return compare(operator.lexeme, a, b)
        except ValueError as e:
            raise DomainError(operator, str(e))
        except (TypeError, OverflowError) as e:
            raise RuntimeFailure(operator, str(e))
        raise RuntimeFailure(operator, f"unknown operator {operator.lexeme}")

    def call_function(self, node: Call) -> Any:
        if not isinstance(node.callee, Variable):
            raise RuntimeFailure(node.paren, 'Can only call functions by name.')
        name = node.callee.name
        func = self.functions.get(name.lexeme)
        if func is None:
            raise RuntimeFailure(name, f"Undefined function '{name.lexeme}'.")
        args = [self.evaluate(arg) for arg in node.arguments]
        if self.debug_level >= 2:
            self.debug(f"call {func!r} with {args!r}")
            if len(args) != func.arity:
                self.debug(f"{func.name} expects {func.arity} arguments, got {len(args)}")
        # extra arguments are dropped, missing parameters stay unbound
        frame = dict(zip(func.params, args))
        if self.call_depth >= self.max_call_depth:
            raise RuntimeFailure(name, 'Maximum recursion depth exceeded.')
        self.call_depth += 1
        try:
            res = self.execute_block(func.body, frame)
        finally:
            self.call_depth -= 1
        if isinstance(res, ReturnSignal):
            return res.value
        return EMPTY


def run_program(source: str, debug_level: int = 0) -> Interpreter:
    """Convenience function to parse and run a tlox program from a source string."""
    parser = Parser()
    statements = parser.load(source)
    interpreter = Interpreter(debug_level=debug_level, reporter=parser.reporter)
    interpreter.run(statements)
    return interpreter


def compile_module(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and execute a tlox file, returning the interpreter instance."""
    parser = Parser()
    statements = parser.load_file(file_path)
    interpreter = Interpreter(debug_level=debug_level, reporter=parser.reporter)
    interpreter.run(statements)
    return interpreter
