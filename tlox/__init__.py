# tlox language package
# This package provides a scanner, parser and tree-walking interpreter for tlox.
from .errors import LoxError, ParseError, RuntimeFailure, ScanError
from .interpreter import Interpreter, compile_module, run_program
from .parser import Parser, parse_program
from .scanner import Scanner

__all__ = [
    'run_program',
    'compile_module',
    'parse_program',
    'Interpreter',
    'Parser',
    'Scanner',
    'LoxError',
    'ScanError',
    'ParseError',
    'RuntimeFailure',
]
