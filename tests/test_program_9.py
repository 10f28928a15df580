from pathlib import Path

from tlox.errors import ErrorReporter
from tlox.interpreter import Interpreter
from tlox.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_9_parse_error_isolation(capsys):
    with open(EXAMPLES / 'program_9.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    reporter = ErrorReporter()
    statements = parse_program(source, reporter)
    interp = Interpreter(reporter=reporter)
    interp.run(statements)
    captured = capsys.readouterr()
    assert captured.out.strip() == 'still running'
    # exactly one diagnostic, pointing at the offending token
    assert len(reporter.errors) == 1
    assert "[line 1] Error at '=': Expect variable name." in captured.err
