import io

from brisk.streams import ConsoleInput, ConsoleOutput, LineBuffer


def test_console_input_strips_terminators():
    source = ConsoleInput(io.StringIO('one\r\ntwo\nthree'))
    assert source.read_line() == 'one'
    assert source.read_line() == 'two'
    assert source.read_line() == 'three'
    assert source.read_line() is None


def test_console_input_keeps_empty_lines():
    source = ConsoleInput(io.StringIO('\n\n'))
    assert source.read_line() == ''
    assert source.read_line() == ''
    assert source.read_line() is None


def test_console_output_writes_lines():
    buf = io.StringIO()
    sink = ConsoleOutput(buf)
    sink.write_line('a')
    sink.write_line('')
    assert buf.getvalue() == 'a\n\n'


def test_console_output_follows_redirected_stdout(capsys):
    ConsoleOutput().write_line('hello')
    assert capsys.readouterr().out == 'hello\n'


def test_line_buffer():
    buf = LineBuffer(['x\n'])
    buf.feed('y', 'z\r\n')
    assert [buf.read_line() for _ in range(4)] == ['x', 'y', 'z', None]
    buf.write_line('out')
    assert buf.output == ['out']
