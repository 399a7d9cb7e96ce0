"""
Tests for the semicolon-delimited record reader.
"""

import io
import tempfile
from pathlib import Path

import pytest

from csvtoxls.errors import RecordReadError
from csvtoxls.reader import open_records, read_records


def records_of(text):
    return list(read_records(io.StringIO(text, newline='')))


class TestReadRecords:
    """Test how CSV text is split into records."""

    def test_semicolon_delimiter(self):
        """Fields are separated by semicolons, not commas."""
        assert records_of('a;b;c\n') == [['a', 'b', 'c']]
        assert records_of('a,b;c\n') == [['a,b', 'c']]

    def test_ragged_rows(self):
        """Rows may have different numbers of fields."""
        records = records_of('a;b\nc\nd;e;f\n')
        assert [len(r) for r in records] == [2, 1, 3]

    def test_leading_whitespace_stripped(self):
        """Leading spaces are dropped, trailing ones kept."""
        assert records_of('a;   b ;c\n') == [['a', 'b ', 'c']]

    def test_leading_tabs_and_unicode_spaces_stripped(self):
        """Tabs and non-breaking spaces count as leading whitespace too."""
        assert records_of('a;\tb;\xa0c\n') == [['a', 'b', 'c']]
        assert records_of('\t a;  b\n') == [['a', 'b']]

    def test_whitespace_inside_quotes_kept(self):
        """Whitespace inside a quoted field is part of the value."""
        assert records_of('" x";\t" y"\n') == [[' x', ' y']]

    def test_quoted_continuation_line_kept(self):
        """A quoted field spanning lines keeps the next line's indentation."""
        assert records_of('a;"x\n\t y";z\nnext\n') == [['a', 'x\n\t y', 'z'], ['next']]

    def test_quoted_fields(self):
        """Quoted fields are unquoted and may contain the delimiter."""
        assert records_of('"x";y\n') == [['x', 'y']]
        assert records_of('"x;y";z\n') == [['x;y', 'z']]

    def test_lazy_quotes(self):
        """A stray quote inside an unquoted field doesn't abort the read."""
        assert records_of('a"b;c\n') == [['a"b', 'c']]

    def test_unterminated_quote(self):
        """An unterminated quoted field is read up to the end of the stream."""
        records = records_of('a;"open\nmore\n')
        assert records[0][0] == 'a'
        assert records[0][1].startswith('open')

    def test_blank_lines_skipped(self):
        """Empty lines produce no record."""
        assert records_of('a\n\n\nb\n') == [['a'], ['b']]

    def test_no_trailing_newline(self):
        """The last line doesn't need a newline."""
        assert records_of('a;b\nc;d') == [['a', 'b'], ['c', 'd']]

    def test_empty_stream(self):
        """An empty stream yields no records."""
        assert records_of('') == []

    def test_lazy(self):
        """Records are produced one at a time."""
        records = read_records(io.StringIO('a\nb\n', newline=''))
        assert next(records) == ['a']
        assert next(records) == ['b']
        with pytest.raises(StopIteration):
            next(records)

    def test_oversized_field_reports_row(self):
        """A parse failure carries the 1-based row index."""
        text = 'ok;row\n' + 'x' * 200000 + '\n'
        with pytest.raises(RecordReadError) as exc_info:
            records_of(text)
        assert exc_info.value.row == 2
        assert 'row 2' in str(exc_info.value)

    def test_decode_error(self):
        """Undecodable bytes fail the read instead of being skipped."""
        raw = io.BytesIO(b'a;b\n\xff\xfe;c\n')
        stream = io.TextIOWrapper(raw, encoding='utf-8', newline='')
        with pytest.raises(RecordReadError) as exc_info:
            list(read_records(stream))
        assert isinstance(exc_info.value.cause, UnicodeDecodeError)


class TestOpenRecords:
    """Test reading records from files."""

    def test_reads_file(self):
        """Records are read from a file on disk."""
        with tempfile.TemporaryDirectory() as temp_dir:
            csv_path = Path(temp_dir) / 'data.csv'
            csv_path.write_bytes('name;city\r\nJosé;Málaga\r\n'.encode('utf-8'))

            with open_records(csv_path) as records:
                assert list(records) == [['name', 'city'], ['José', 'Málaga']]

    def test_byte_order_mark_skipped(self):
        """A UTF-8 byte order mark doesn't end up in the first field."""
        with tempfile.TemporaryDirectory() as temp_dir:
            csv_path = Path(temp_dir) / 'bom.csv'
            csv_path.write_bytes(b'\xef\xbb\xbfa;b\n')

            with open_records(csv_path) as records:
                assert list(records) == [['a', 'b']]

    def test_missing_file(self):
        """Opening a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            with open_records('/nonexistent/file.csv'):
                pass


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
