from pathlib import Path

from brisk.interpreter import run_file
from brisk.streams import LineBuffer

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_10_reads_until_done():
    streams = LineBuffer(['one', 'ten', 'two', 'done', 'ignored'])
    run_file(str(EXAMPLES / 'program_10.brisk'), input_stream=streams, output_stream=streams)
    assert streams.output == ['lines: 3', 'total: 12']
    assert streams.pending == ['ignored']
