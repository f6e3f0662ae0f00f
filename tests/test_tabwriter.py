import io

import pytest

from fsops.io.tabwriter import TabWriter


def _aligned(text, **kwargs):
    sink = io.StringIO()
    writer = TabWriter(sink, **kwargs)
    writer.write(text)
    writer.flush()
    return sink.getvalue()


def test_nothing_written_until_flush():
    sink = io.StringIO()
    writer = TabWriter(sink)
    writer.write("a\tb\n")
    assert sink.getvalue() == ""
    writer.flush()
    assert sink.getvalue() == "a    b\n"


def test_min_width_and_padding():
    assert _aligned("a\tb\nlonger\tc\n") == "a        b\nlonger   c\n"


def test_last_cell_is_not_padded():
    assert _aligned("x\tshort\nx\tmuch longer\n") == "x    short\nx    much longer\n"


def test_untabbed_line_splits_column_blocks():
    text = "aaaaaaaa\tb\nerror text\nc\td\n"
    assert _aligned(text) == "aaaaaaaa   b\nerror text\nc    d\n"


def test_custom_pad_char():
    assert _aligned("a\tb\n", min_width=0, padding=1, pad_char=".") == "a.b\n"


def test_unterminated_last_line_is_kept():
    assert _aligned("a\tb\nc\td") == "a    b\nc    d"


def test_flush_twice_writes_once():
    sink = io.StringIO()
    writer = TabWriter(sink)
    writer.write("a\n")
    writer.flush()
    writer.flush()
    assert sink.getvalue() == "a\n"


def test_pad_char_must_be_single_character():
    with pytest.raises(ValueError):
        TabWriter(io.StringIO(), pad_char="--")
