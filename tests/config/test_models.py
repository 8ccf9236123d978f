"""Tests for config/models.py module."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from convexgen.config.models import (
    ConvexConfig,
    ConvexGenConfig,
    DataLayerConfig,
    LogOutputConfig,
    SkipConfig,
)
from convexgen.parse.models import DeclarationStyle


class TestDefaults:
    def test_default_sections(self) -> None:
        config = ConvexGenConfig()

        assert config.convex.structure == "nested"
        assert config.data_layer.file_structure == "grouped"
        assert config.generators.hooks and config.generators.api and config.generators.types
        assert config.logging.level == "WARNING"
        assert r"\.test\." in config.skip.patterns

    def test_output_dirs(self) -> None:
        config = ConvexGenConfig(data_layer=DataLayerConfig(path=Path("/out")))

        assert config.hooks_output_dir == Path("/out/generated-hooks")
        assert config.api_output_dir == Path("/out/generated-api")
        assert config.types_output_dir == Path("/out/generated-types")

    def test_declaration_style(self) -> None:
        fluent = ConvexGenConfig(convex=ConvexConfig(fluent_convex=True))

        assert fluent.declaration_style is DeclarationStyle.FLUENT_CHAIN
        assert ConvexGenConfig().declaration_style is DeclarationStyle.STANDARD_CALL


class TestValidation:
    def test_invalid_structure_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ConvexConfig(structure="deep")  # type: ignore[arg-type]

    def test_invalid_skip_pattern_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SkipConfig(patterns=["[unclosed"])

    def test_relative_log_file_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/gen.log")

    def test_stream_destinations_accepted(self) -> None:
        assert LogOutputConfig(destination="stdout").destination == "stdout"
