from pathlib import Path

from brisk.interpreter import Interpreter
from brisk.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_7_break(capsys):
    source = (EXAMPLES / 'program_7.brisk').read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter(max_iterations=100)
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == 'stopped at 4'
