"""
Unit tests for split_lines.

Lines must be reassembled correctly no matter where chunk boundaries fall.
"""

from aam_cdf_pipeline.ingestion.parsers import split_lines


class TestSplitLines:
    """Tests for split_lines function."""

    def test_single_chunk(self):
        assert list(split_lines([b"a\nb\nc\n"])) == [b"a", b"b", b"c"]

    def test_line_split_across_chunks(self):
        """A line cut mid-way by a chunk boundary is emitted whole."""
        chunks = [b"hel", b"lo\nwor", b"ld\n"]
        assert list(split_lines(chunks)) == [b"hello", b"world"]

    def test_every_chunking_gives_same_lines(self):
        data = b"first\x01line\nsecond\nthird line\n"
        expected = [b"first\x01line", b"second", b"third line"]
        for size in range(1, len(data) + 1):
            chunks = [data[i : i + size] for i in range(0, len(data), size)]
            assert list(split_lines(chunks)) == expected

    def test_final_line_without_newline(self):
        """Bytes after the last newline form a final line."""
        assert list(split_lines([b"a\nb"])) == [b"a", b"b"]

    def test_no_extra_line_after_trailing_newline(self):
        assert list(split_lines([b"a\n"])) == [b"a"]

    def test_crlf_stripped(self):
        assert list(split_lines([b"a\r\nb\r", b"\n"])) == [b"a", b"b"]

    def test_cr_at_end_of_stream_stripped(self):
        assert list(split_lines([b"a\r"])) == [b"a"]

    def test_blank_lines_kept(self):
        """Blank lines are passed on for the parser to count."""
        assert list(split_lines([b"a\n\n\nb\n"])) == [b"a", b"", b"", b"b"]

    def test_empty_chunks_ignored(self):
        assert list(split_lines([b"", b"a", b"", b"\n", b""])) == [b"a"]

    def test_empty_input(self):
        assert list(split_lines([])) == []

    def test_lazy(self):
        """Lines are yielded before later chunks are read."""
        pulled = []

        def chunks():
            for chunk in (b"one\n", b"two\n"):
                pulled.append(chunk)
                yield chunk

        lines = split_lines(chunks())
        assert next(lines) == b"one"
        assert pulled == [b"one\n"]
