from pathlib import Path

from tlox.interpreter import Interpreter
from tlox.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_3_string_concatenation(capsys):
    with open(EXAMPLES / 'program_3.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    statements = parse_program(source)
    interp = Interpreter()
    interp.run(statements)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == [
        'Hello World!',
        'Hello5',
        '1Hello5',
        'pi is 3.5',
        'flag: true',
        'nil:',
        'it"s',
    ]
