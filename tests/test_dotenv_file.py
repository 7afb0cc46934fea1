"""Tests for reading, serializing and writing KEY=VALUE files."""

import pytest

from dotenv_registry.storage.dotenv_file import (
    EnvFileParseError,
    config_file_exists,
    parse_line,
    read_env_file,
    serialize_env,
    write_env_file,
)


class TestParseLine:
    """Tests for single-line parsing."""

    def test_simple_assignment(self):
        assert parse_line("KEY=value") == ("KEY", "value")

    def test_splits_on_first_separator_only(self):
        assert parse_line("URL=http://host/?a=b") == ("URL", "http://host/?a=b")

    def test_trims_whitespace(self):
        assert parse_line("  KEY  =  value  ") == ("KEY", "value")

    def test_strips_export_from_key(self):
        assert parse_line("export OPTION_B=foo") == ("OPTION_B", "foo")

    def test_export_only_stripped_as_token(self):
        """A key that merely starts with 'export' is kept."""
        assert parse_line("exported=1") == ("exported", "1")

    def test_export_not_stripped_from_value(self):
        assert parse_line("CMD=export FOO") == ("CMD", "export FOO")

    def test_strips_double_quotes(self):
        assert parse_line('OPTION_H="my string"') == ("OPTION_H", "my string")

    def test_strips_single_quotes(self):
        assert parse_line("OPTION_A='quoted'") == ("OPTION_A", "quoted")

    def test_strips_only_one_level_of_quotes(self):
        assert parse_line("""KEY="'inner'\"""") == ("KEY", "'inner'")

    def test_mismatched_quotes_kept(self):
        assert parse_line("""KEY="value'""") == ("KEY", "\"value'")

    def test_lone_quote_kept(self):
        assert parse_line('KEY="') == ("KEY", '"')

    def test_empty_value(self):
        assert parse_line("KEY=") == ("KEY", "")

    def test_no_separator(self):
        assert parse_line("just some text") is None

    def test_empty_key(self):
        assert parse_line("=value") is None

    def test_custom_separator(self):
        assert parse_line("HOST: example.com", ":") == ("HOST", "example.com")


class TestReadEnvFile:
    """Tests for read_env_file."""

    def test_read_plain(self, fixtures_dir):
        values = read_env_file(fixtures_dir / "plain.env")
        assert values == {
            "OPTION_A": "1",
            "OPTION_B": "2",
            "OPTION_C": "3",
            "OPTION_D": "4",
            "OPTION_E": "5",
            "OPTION_F": "",
            "OPTION_G": "",
            "OPTION_H": "my string",
        }

    def test_read_unquoted(self, fixtures_dir):
        values = read_env_file(fixtures_dir / "unquoted.env")
        assert values["OPTION_A"] == "some quoted phrase"
        assert values["OPTION_B"] == "first one with an unquoted phrase"
        assert values["OPTION_D"] == "then another one with an unquoted phrase special è char"
        assert values["OPTION_E"] == "then another one quoted phrase"

    def test_read_exported(self, fixtures_dir):
        values = read_env_file(fixtures_dir / "exported.env")
        assert values == {"OPTION_A": "2", "OPTION_B": "\\n"}

    def test_comments_and_blank_lines_skipped(self, fixtures_dir):
        values = read_env_file(fixtures_dir / "test.env")
        assert "# Application" not in values
        assert values["LOG_PATH"] == "storage/logs/app.log"
        assert len(values) == 10

    def test_malformed_lines_skipped(self, fixtures_dir):
        values = read_env_file(fixtures_dir / "malformed.env")
        assert values == {"GOOD_ONE": "1", "GOOD_TWO": "2"}

    def test_strict_mode_rejects_malformed_line(self, fixtures_dir):
        with pytest.raises(EnvFileParseError) as exc_info:
            read_env_file(fixtures_dir / "malformed.env", strict=True)

        assert exc_info.value.line_number == 2
        assert exc_info.value.line == "this line has no separator"
        assert "malformed.env" in str(exc_info.value)

    def test_strict_error_is_value_error(self, fixtures_dir):
        with pytest.raises(ValueError):
            read_env_file(fixtures_dir / "malformed.env", strict=True)

    def test_custom_separator(self, fixtures_dir):
        values = read_env_file(fixtures_dir / "colon.env", ":")
        assert values == {
            "HOST": "example.com",
            "PORT": "8080",
            "URL": "http://example.com:8080",
        }

    def test_later_duplicate_wins(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("KEY=first\nKEY=second\n")
        assert read_env_file(path) == {"KEY": "second"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError) as exc_info:
            read_env_file(tmp_path / "missing.env")
        assert "missing.env" in str(exc_info.value)

    def test_directory_is_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_env_file(tmp_path)

    def test_keys_keep_their_case(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("lower_key=1\n")
        assert read_env_file(path) == {"lower_key": "1"}


class TestConfigFileExists:
    """Tests for config_file_exists."""

    def test_existing_file(self, fixtures_dir):
        assert config_file_exists(fixtures_dir / "plain.env")

    def test_missing_file(self, tmp_path):
        assert not config_file_exists(tmp_path / "nope.env")

    def test_directory(self, tmp_path):
        assert not config_file_exists(tmp_path)


class TestSerializeEnv:
    """Tests for serialize_env."""

    def test_insertion_order(self):
        assert serialize_env({"B": "2", "A": "1"}) == "B=2\nA=1\n"

    def test_sorted(self):
        assert serialize_env({"B": "2", "A": "1"}, sort_keys=True) == "A=1\nB=2\n"

    def test_custom_separator(self):
        assert serialize_env({"HOST": "x"}, ":") == "HOST:x\n"

    def test_non_string_values(self):
        data = serialize_env({"FLAG": True, "COUNT": 3, "NOTHING": None})
        assert data == "FLAG=true\nCOUNT=3\nNOTHING=\n"

    def test_quotes_not_added(self):
        assert serialize_env({"H": "my string"}) == "H=my string\n"

    def test_empty_mapping(self):
        assert serialize_env({}) == ""


class TestWriteEnvFile:
    """Tests for write_env_file."""

    def test_writes_content(self, tmp_path):
        path = tmp_path / ".env"
        write_env_file(path, "A=1\n")
        assert path.read_text() == "A=1\n"

    def test_overwrites(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("OLD=1\n")
        write_env_file(path, "NEW=2\n")
        assert path.read_text() == "NEW=2\n"

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "deeper" / "app.env"
        write_env_file(path, "A=1\n")
        assert path.read_text() == "A=1\n"

    def test_with_file_lock(self, tmp_path):
        path = tmp_path / ".env"
        write_env_file(path, "A=1\n", lock=True)
        assert path.read_text() == "A=1\n"

    def test_write_failure_raises_os_error(self, tmp_path):
        # Parent "directory" is a regular file
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(OSError) as exc_info:
            write_env_file(blocker / "app.env", "A=1\n")
        assert "Failed to write config file" in str(exc_info.value)

    def test_round_trip(self, tmp_path, fixtures_dir):
        values = read_env_file(fixtures_dir / "plain.env")
        path = tmp_path / "copy.env"
        write_env_file(path, serialize_env(values))
        assert read_env_file(path) == values
