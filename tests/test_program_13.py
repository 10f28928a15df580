from pathlib import Path

from tlox.interpreter import Interpreter
from tlox.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_13_early_return_unwinds_scopes(capsys):
    with open(EXAMPLES / 'program_13.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    statements = parse_program(source)
    interp = Interpreter()
    interp.run(statements)
    captured = capsys.readouterr()
    assert captured.out.strip() == '4'
    # every frame pushed by the call, loop body and inner block was popped
    assert interp.environment.depth == 1
    assert interp.get_var('doubled') is None
    # dump writes the scopes and function table to stderr
    assert "'functions': {'find': ['limit']}" in captured.err
