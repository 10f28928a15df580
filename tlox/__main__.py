"""CLI entry point for the tlox interpreter.

Usage:
    python -m tlox [-v|-vv|-vvv] [--strict] <program_file>
    python -m tlox [-v...] [-]
    python -m tlox --emit-ast <program_file>
    python -m tlox [-v...] [--strict] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --strict      Treat diagnostics as fatal: exit 65 on scan/parse errors,
                70 if any runtime failure was reported
  --emit-ast    Parse the given file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file, or with '-', an interactive shell is started.
Debug information is written to `debug.txt` in the current directory
when verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_from_obj, ast_to_obj
from .errors import ExitDirective
from .interpreter import Interpreter
from .parser import Parser
from .shell import Shell

EXIT_DATA_ERROR = 65
EXIT_SOFTWARE_ERROR = 70


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(statements, parser: Parser, debug_level: int, strict: bool) -> None:
    """Run parsed statements, raising ExitDirective when strict mode asks for one."""
    if strict and parser.reporter.had_error:
        raise ExitDirective(EXIT_DATA_ERROR, 'source contains errors')
    interpreter = Interpreter(debug_level=debug_level, reporter=parser.reporter)
    interpreter.run(statements)
    if strict and parser.reporter.had_runtime_error:
        raise ExitDirective(EXIT_SOFTWARE_ERROR, 'runtime failure')


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog='tlox', description="tlox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--strict', action='store_true', help='exit with a non-zero status on any diagnostic')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given source file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help="program file to execute, or '-' for the interactive shell")
    args = parser.parse_args(argv)

    try:
        # Emit AST mode
        if args.emit_ast:
            program_file = Path(args.emit_ast)
            lox_parser = Parser()
            statements = lox_parser.load(read_source(program_file))
            if args.strict and lox_parser.reporter.had_error:
                raise ExitDirective(EXIT_DATA_ERROR, 'source contains errors')
            out_path = program_file.with_name(program_file.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(ast_to_obj(statements), out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return

        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            data = json.loads(read_source(ast_path))
            execute(ast_from_obj(data), Parser(), args.v, args.strict)
            return

        # Interactive shell
        if not args.program or args.program == '-':
            lox_parser = Parser()
            interpreter = Interpreter(debug_level=args.v, reporter=lox_parser.reporter)
            Shell(lox_parser, interpreter).cmdloop()
            return

        # Default: execute source file
        lox_parser = Parser()
        statements = lox_parser.load(read_source(Path(args.program)))
        execute(statements, lox_parser, args.v, args.strict)
    except ExitDirective as e:
        print(f"tlox: {e}", file=sys.stderr)
        sys.exit(e.code)


if __name__ == '__main__':
    main()
