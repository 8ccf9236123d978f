"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CONVEX_GEN__SECTION__KEY)
3. Project config file (.convex-gen.json, convex-gen.json, .convex-gen.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    CONVEX_GEN__<SECTION>__<KEY>=<VALUE>

Examples:
    CONVEX_GEN__ORG=@acme
    CONVEX_GEN__DATA_LAYER__FILE_STRUCTURE=split
    CONVEX_GEN__CONVEX__FLUENT_CONVEX=true
"""

import re
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from convexgen.parse.models import DeclarationStyle

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Structure = Literal["nested", "flat"]
FileStructure = Literal["grouped", "split", "both"]
ImportStyle = Literal["package", "relative"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CONVEX_GEN__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Per-file skips are reported at WARNING.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ConvexConfig(BaseModel):
    """Where to find the Convex backend.

    Env vars:
        CONVEX_GEN__CONVEX__PATH: Convex functions directory
        CONVEX_GEN__CONVEX__SCHEMA_PATH: Schema file or directory
        CONVEX_GEN__CONVEX__STRUCTURE: nested or flat
        CONVEX_GEN__CONVEX__FLUENT_CONVEX: Parse fluent builder chains
    """

    path: Path = Field(
        default=Path("packages/backend"),
        description="Convex functions directory, relative to the project root.",
    )
    schema_path: Path | None = Field(
        default=None,
        description="Schema file or directory. Detected from `path` when unset.",
    )
    structure: Structure = Field(
        default="nested",
        description="Directory layout of the functions tree.",
    )
    fluent_convex: bool = Field(
        default=False,
        description="Functions are declared as fluent builder chains "
        "(`adminQuery.input({...}).handler(...).public()`) instead of `query({...})`.",
    )


class DataLayerConfig(BaseModel):
    """Where generated code is written.

    Env vars:
        CONVEX_GEN__DATA_LAYER__PATH: Data layer source root
        CONVEX_GEN__DATA_LAYER__FILE_STRUCTURE: grouped, split or both
    """

    path: Path = Field(default=Path("packages/data-layer/src"))
    hooks_dir: str = "generated-hooks"
    api_dir: str = "generated-api"
    types_dir: str = "generated-types"
    file_structure: FileStructure = Field(
        default="grouped",
        description="grouped: one file per top-level namespace; "
        "split: one file per namespace; both: emit both layouts.",
    )


class ImportsConfig(BaseModel):
    """Import paths used verbatim in generated `import` statements."""

    style: ImportStyle = "package"
    api: str | None = Field(
        default=None,
        description="Module exporting the `api` reference object. "
        "Defaults to <org>/backend/api for the package style.",
    )
    data_model: str | None = Field(
        default=None,
        description="Module exporting `Doc` and `Id`. "
        "Defaults to <org>/backend/dataModel for the package style.",
    )


class GeneratorsConfig(BaseModel):
    """Which generators run."""

    hooks: bool = True
    api: bool = True
    types: bool = True


class SkipConfig(BaseModel):
    """Files and directories the scanner ignores."""

    directories: list[str] = Field(
        default_factory=lambda: ["_generated", "node_modules", ".turbo"],
        description="Directory names pruned from the walk.",
    )
    patterns: list[str] = Field(
        default_factory=lambda: [
            r"^_",
            r"\.test\.",
            r"\.spec\.",
            r"^debug",
            r"^migrate",
            r"^seed",
        ],
        description="Regexes searched against each file name.",
    )

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid skip pattern {pattern!r}: {e}") from e
        return v


class ConvexGenConfig(BaseModel):
    """Root configuration model (type hint for the loaded settings)."""

    org: str = ""
    convex: ConvexConfig = Field(default_factory=ConvexConfig)
    data_layer: DataLayerConfig = Field(default_factory=DataLayerConfig)
    imports: ImportsConfig = Field(default_factory=ImportsConfig)
    generators: GeneratorsConfig = Field(default_factory=GeneratorsConfig)
    skip: SkipConfig = Field(default_factory=SkipConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def hooks_output_dir(self) -> Path:
        return self.data_layer.path / self.data_layer.hooks_dir

    @property
    def api_output_dir(self) -> Path:
        return self.data_layer.path / self.data_layer.api_dir

    @property
    def types_output_dir(self) -> Path:
        return self.data_layer.path / self.data_layer.types_dir

    @property
    def declaration_style(self) -> "DeclarationStyle":
        # Import here to avoid circular dependency
        from convexgen.parse.models import DeclarationStyle

        if self.convex.fluent_convex:
            return DeclarationStyle.FLUENT_CHAIN
        return DeclarationStyle.STANDARD_CALL

    @property
    def api_import(self) -> str:
        """Resolved `api` import path (defaults are applied by the loader)."""
        return self.imports.api or ""

    @property
    def data_model_import(self) -> str:
        return self.imports.data_model or ""
