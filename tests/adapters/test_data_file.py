# tests/adapters/test_data_file.py
import pytest

from vocab_swipe.adapters.persistence import data_file


class TestLoads:
    def test_with_link_header(self):
        parsed = data_file.loads('#link: https://example.org/list\n[{"term": "red"}]')

        assert parsed.origin_link == "https://example.org/list"
        assert parsed.words == [{"term": "red"}]

    def test_without_link_header(self):
        parsed = data_file.loads('[{"term": "red"}]')

        assert parsed.origin_link is None
        assert parsed.words == [{"term": "red"}]

    def test_byte_order_mark_is_ignored(self):
        parsed = data_file.loads("\ufeff#link: x\n[]")
        assert parsed.origin_link == "x"
        assert parsed.words == []

    def test_empty_link_value(self):
        assert data_file.loads("#link:\n[]").origin_link is None

    @pytest.mark.parametrize("content", [
        "",
        "#link: https://example.org\n",
        "[{ broken",
        '{"term": "red"}',
    ])
    def test_invalid_content(self, content):
        with pytest.raises(data_file.DataFileError):
            data_file.loads(content)


class TestDumps:
    def test_header_is_written_first(self):
        text = data_file.dumps([{"term": "red"}], "https://example.org/list")

        first_line, _, body = text.partition("\n")
        assert first_line == "#link: https://example.org/list"
        assert data_file.loads(text).words == [{"term": "red"}]

    def test_no_header_without_link(self):
        assert data_file.dumps([{"term": "red"}]).startswith("[")

    def test_newlines_in_link_are_flattened(self):
        text = data_file.dumps([], "https://example.org/\nevil")
        assert data_file.loads(text).origin_link == "https://example.org/ evil"

    def test_non_ascii_is_kept_readable(self):
        assert "con mèo" in data_file.dumps([{"term": "cat", "translation": "con mèo"}])
