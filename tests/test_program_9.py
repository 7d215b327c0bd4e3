from pathlib import Path

from brisk.interpreter import Interpreter
from brisk.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_9_strings_and_comparisons(capsys):
    source = (EXAMPLES / 'program_9.brisk').read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.splitlines()
    assert out == ['Hello, Brisk!', 'a1', '1a', '33', '123', 'false', 'true', 'true', '6']
