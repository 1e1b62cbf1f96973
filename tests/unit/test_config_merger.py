"""Unit tests for configuration merger.

These tests verify:
- CLI args override config values when provided
- CLI args are ignored when None
- The merged config is revalidated and the original is untouched
- Merged configs convert to the baseplate set input DTO
"""

import pytest

from gridfinity.application import BaseplateSetInput
from gridfinity.application.config import (
    BaseplateSetConfiguration,
    ConfigErrorType,
    ConfigFileError,
    OutputConfig,
    SizeConfig,
    merge_config_with_cli,
)
from gridfinity.domain import BaseplateOption


class TestMergeConfigWithCli:
    """Tests for merge_config_with_cli function."""

    @pytest.fixture
    def base_config(self) -> BaseplateSetConfiguration:
        return BaseplateSetConfiguration(
            schema_version="1.0",
            footprint=SizeConfig(width=508, depth=332),
            printbed=SizeConfig(width=256, depth=256),
            front_padding=4.0,
            output=OutputConfig(directory="drawer"),
        )

    def test_no_overrides_returns_equivalent_config(
        self, base_config: BaseplateSetConfiguration
    ) -> None:
        assert merge_config_with_cli(base_config) == base_config

    def test_footprint_override(self, base_config: BaseplateSetConfiguration) -> None:
        merged = merge_config_with_cli(base_config, width=600.0)
        assert merged.footprint.width == 600.0
        assert merged.footprint.depth == 332.0

    def test_bed_override(self, base_config: BaseplateSetConfiguration) -> None:
        merged = merge_config_with_cli(base_config, bed_width=220.0, bed_depth=220.0)
        assert merged.printbed.width == 220.0
        assert merged.printbed.depth == 220.0

    def test_scalar_overrides(self, base_config: BaseplateSetConfiguration) -> None:
        merged = merge_config_with_cli(
            base_config, front_padding=0.0, tolerance=0.3, output_dir="elsewhere"
        )
        assert merged.front_padding == 0.0
        assert merged.tolerance == 0.3
        assert merged.output.directory == "elsewhere"

    def test_options_override(self, base_config: BaseplateSetConfiguration) -> None:
        merged = merge_config_with_cli(base_config, options=["magnets"])
        assert merged.option_set == frozenset({BaseplateOption.MAGNETS})

    def test_original_is_untouched(self, base_config: BaseplateSetConfiguration) -> None:
        merge_config_with_cli(base_config, width=600.0)
        assert base_config.footprint.width == 508.0

    def test_overrides_are_validated(self, base_config: BaseplateSetConfiguration) -> None:
        with pytest.raises(ConfigFileError) as exc_info:
            merge_config_with_cli(base_config, tolerance=-1.0)
        assert exc_info.value.error_type is ConfigErrorType.VALIDATION
        assert exc_info.value.issues[0].path == "tolerance"
        assert exc_info.value.path is None


class TestConfigToInput:
    def test_from_config(self) -> None:
        config = BaseplateSetConfiguration(
            schema_version="1.0",
            footprint=SizeConfig(width=400, depth=300),
            printbed=SizeConfig(width=220, depth=200),
            front_padding=5.0,
            options=[BaseplateOption.TABS, BaseplateOption.SCREWS],
            tolerance=0.25,
        )
        set_input = BaseplateSetInput.from_config(config)
        assert set_input.footprint_width == 400
        assert set_input.bed_depth == 200
        assert set_input.front_padding == 5.0
        assert set_input.options == ["tabs", "screws"]
        assert set_input.settings.tolerance == 0.25
        assert set_input.validate() == []
