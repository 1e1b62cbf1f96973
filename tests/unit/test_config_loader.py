"""Unit tests for loading configuration files.

These tests verify:
- Valid files load into BaseplateSetConfiguration
- Missing, unreadable and malformed files raise ConfigFileError
- Schema problems are reported as issues located by JSON path
"""

from pathlib import Path

import pytest

from gridfinity.application.config import (
    BaseplateSetConfiguration,
    ConfigErrorType,
    ConfigFileError,
    ConfigIssue,
    load_config,
    parse_config,
)
from gridfinity.domain import BaseplateOption


def _set_data(**overrides) -> dict:
    data = {
        "schema_version": "1.0",
        "footprint": {"width": 100, "depth": 100},
        "printbed": {"width": 100, "depth": 100},
    }
    data.update(overrides)
    return data


class TestLoadConfig:
    def test_valid_minimal(self, fixtures_path: Path) -> None:
        config = load_config(fixtures_path / "valid_minimal.json")
        assert isinstance(config, BaseplateSetConfiguration)
        assert config.footprint.width == 508
        assert config.printbed.depth == 256

    def test_valid_full(self, fixtures_path: Path) -> None:
        config = load_config(fixtures_path / "valid_full.json")
        assert config.front_padding == 5.0
        assert config.option_set == frozenset(BaseplateOption) - {BaseplateOption.FOUNDATION}
        assert config.output.directory == "drawer"
        assert config.output.assembly is False

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigFileError) as exc_info:
            load_config(tmp_path / "missing.json")
        assert exc_info.value.error_type is ConfigErrorType.NOT_FOUND
        assert exc_info.value.path == tmp_path / "missing.json"
        assert exc_info.value.issues == ()

    def test_invalid_json(self, fixtures_path: Path) -> None:
        with pytest.raises(ConfigFileError) as exc_info:
            load_config(fixtures_path / "invalid_json.json")
        assert exc_info.value.error_type is ConfigErrorType.JSON_SYNTAX
        issue = exc_info.value.issues[0]
        assert issue.line == 4
        assert issue.column is not None

    def test_unknown_field(self, fixtures_path: Path) -> None:
        with pytest.raises(ConfigFileError) as exc_info:
            load_config(fixtures_path / "unknown_field.json")
        assert exc_info.value.error_type is ConfigErrorType.VALIDATION
        colour = [issue for issue in exc_info.value.issues if issue.path == "colour"]
        assert colour[0].value == "red"

    def test_negative_dimension(self, fixtures_path: Path) -> None:
        with pytest.raises(ConfigFileError) as exc_info:
            load_config(fixtures_path / "negative_dimension.json")
        assert exc_info.value.issues[0].path == "footprint.width"
        assert "footprint.width" in str(exc_info.value)

    def test_infinity_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "infinite.json"
        path.write_text(
            '{"schema_version": "1.0", "footprint": {"width": Infinity, "depth": 100}, '
            '"printbed": {"width": 100, "depth": 100}}',
            encoding="utf-8",
        )
        with pytest.raises(ConfigFileError) as exc_info:
            load_config(path)
        assert exc_info.value.issues[0].path == "footprint.width"

    def test_directory_is_a_read_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigFileError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.error_type is ConfigErrorType.UNREADABLE


class TestParseConfig:
    def test_valid(self) -> None:
        assert parse_config(_set_data()).footprint.width == 100

    def test_indexed_paths(self) -> None:
        with pytest.raises(ConfigFileError) as exc_info:
            parse_config(_set_data(options=["tabs", "glue"]))
        assert exc_info.value.issues[0].path == "options[1]"

    def test_every_problem_is_reported(self) -> None:
        data = _set_data(footprint={"width": -1, "depth": 100}, tolerance=-1)
        with pytest.raises(ConfigFileError) as exc_info:
            parse_config(data)
        paths = {issue.path for issue in exc_info.value.issues}
        assert paths == {"footprint.width", "tolerance"}
        assert exc_info.value.path is None


class TestConfigIssue:
    def test_located_by_path(self) -> None:
        issue = ConfigIssue("footprint.width", "Input should be greater than 0", -1)
        assert str(issue) == "footprint.width: Input should be greater than 0 (got: -1)"

    def test_located_by_line(self) -> None:
        issue = ConfigIssue("", "Expecting value", line=3, column=7)
        assert str(issue) == "line 3, column 7: Expecting value"

    def test_error_lists_issues(self) -> None:
        error = ConfigFileError(
            "Invalid baseplate set in configuration",
            ConfigErrorType.VALIDATION,
            issues=[ConfigIssue("tolerance", "too large", 5)],
        )
        assert str(error).splitlines() == [
            "Invalid baseplate set in configuration",
            "  - tolerance: too large (got: 5)",
        ]
