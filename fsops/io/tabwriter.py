"""
Column alignment for tab-separated text.

Text written to a :class:`TabWriter` is buffered until :meth:`TabWriter.flush`.
Every tab-terminated cell belongs to a column; the last cell of a line is not
part of any column and is written as-is. A column's width is computed over a
block of consecutive lines that all have a cell in that column, so an unaligned
line (such as a diagnostic with no tabs) splits the blocks around it.
"""
from typing import List, TextIO


class TabWriter:
    def __init__(
        self,
        output: TextIO,
        min_width: int = 5,
        padding: int = 3,
        pad_char: str = " ",
    ):
        if len(pad_char) != 1:
            raise ValueError("pad_char must be a single character")
        self._output = output
        self._min_width = min_width
        self._padding = padding
        self._pad_char = pad_char
        self._buffer = ""

    def write(self, text: str) -> int:
        self._buffer += text
        return len(text)

    def flush(self) -> None:
        """Align buffered lines and write them to the output."""
        if not self._buffer:
            return
        text, self._buffer = self._buffer, ""
        terminated = text.endswith("\n")
        lines = text.split("\n")
        if terminated:
            lines.pop()
        rows = [line.split("\t") for line in lines]
        widths = self._column_widths(rows)

        out = []
        for row, row_widths in zip(rows, widths):
            cells = [
                cell + self._pad_char * (row_widths[idx] - len(cell))
                for idx, cell in enumerate(row[:-1])
            ]
            cells.append(row[-1])
            out.append("".join(cells))
        result = "\n".join(out)
        if terminated:
            result += "\n"
        self._output.write(result)

    def _column_widths(self, rows: List[List[str]]) -> List[List[int]]:
        widths = [[0] * (len(row) - 1) for row in rows]
        columns = max((len(row) - 1 for row in rows), default=0)
        for col in range(columns):
            start = 0
            while start < len(rows):
                if len(rows[start]) - 1 <= col:
                    start += 1
                    continue
                end = start
                while end < len(rows) and len(rows[end]) - 1 > col:
                    end += 1
                width = self._min_width
                for idx in range(start, end):
                    width = max(width, len(rows[idx][col]) + self._padding)
                for idx in range(start, end):
                    widths[idx][col] = width
                start = end
        return widths
