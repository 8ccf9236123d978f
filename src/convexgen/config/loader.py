"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (CONVEX_GEN__SECTION__KEY)
3. Project config file (JSON or YAML, camelCase or snake_case keys)
4. Built-in defaults (lowest priority)

After the sources are merged, defaults that depend on other values (import
paths derived from `org`, schema location derived from the Convex path) are
filled in and every relative path is resolved against the project root.
"""

import json
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from convexgen.config.constants import CONFIG_FILE_NAMES
from convexgen.config.models import (
    ConvexConfig,
    ConvexGenConfig,
    DataLayerConfig,
    GeneratorsConfig,
    ImportsConfig,
    LoggingConfig,
    SkipConfig,
)
from convexgen.core.errors import ConfigError

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _normalize_keys(value: Any) -> Any:
    """Convert camelCase mapping keys (as written in .convex-gen.json) to snake_case."""
    if isinstance(value, dict):
        return {_to_snake(str(k)): _normalize_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize_keys(v) for v in value]
    return value


def find_config_file(root: Path) -> Path:
    """Return the first config file present in `root`.

    Raises:
        ConfigError: If none of the known file names exist.
    """
    for name in CONFIG_FILE_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    raise ConfigError.file_not_found(f"{root} (tried: {', '.join(CONFIG_FILE_NAMES)})")


def _load_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError.file_not_found(str(path))
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError.parse_error(str(path), str(e)) from e

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text) if text.strip() else {}
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError.parse_error(str(path), str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be an object")
    return _normalize_keys(data)


class _FileSource(PydanticBaseSettingsSource):
    """Settings source that reads from the pre-loaded config file."""

    def __init__(self, settings_cls: type[BaseSettings], file_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._file_config = file_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._file_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._file_config


def _make_settings_class(file_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class bound to one config file's contents."""

    class ConvexGenSettings(BaseSettings):
        """Root settings. Env vars: CONVEX_GEN__ORG, CONVEX_GEN__DATA_LAYER__PATH, etc."""

        model_config = SettingsConfigDict(
            env_prefix="CONVEX_GEN__",
            env_nested_delimiter="__",
            case_sensitive=False,
            extra="ignore",
        )

        org: str = ""
        convex: ConvexConfig = ConvexConfig()
        data_layer: DataLayerConfig = DataLayerConfig()
        imports: ImportsConfig = ImportsConfig()
        generators: GeneratorsConfig = GeneratorsConfig()
        skip: SkipConfig = SkipConfig()
        logging: LoggingConfig = LoggingConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > config file
            return (init_settings, env_settings, _FileSource(settings_cls, file_config))

    return ConvexGenSettings


def _resolve(root: Path, path: Path) -> Path:
    return path if path.is_absolute() else (root / path)


def _detect_schema_path(convex_path: Path) -> Path:
    schema_dir = convex_path / "schema"
    schema_file = convex_path / "schema.ts"
    if schema_dir.exists():
        return schema_dir
    if schema_file.exists():
        return schema_file
    return schema_dir


def apply_defaults(config: ConvexGenConfig, root: Path) -> ConvexGenConfig:
    """Fill value-dependent defaults and resolve paths against `root`."""
    convex_path = _resolve(root, config.convex.path)
    schema_path = (
        _resolve(root, config.convex.schema_path)
        if config.convex.schema_path is not None
        else _detect_schema_path(convex_path)
    )
    convex = config.convex.model_copy(update={"path": convex_path, "schema_path": schema_path})

    data_layer = config.data_layer.model_copy(
        update={"path": _resolve(root, config.data_layer.path)}
    )

    use_package = config.imports.style == "package" and bool(config.org)
    api_import = config.imports.api or (
        f"{config.org}/backend/api" if use_package else "../../../backend/_generated/api"
    )
    data_model_import = config.imports.data_model or (
        f"{config.org}/backend/dataModel"
        if use_package
        else "../../../backend/_generated/dataModel"
    )
    imports = config.imports.model_copy(update={"api": api_import, "data_model": data_model_import})

    return config.model_copy(
        update={"convex": convex, "data_layer": data_layer, "imports": imports}
    )


def validate_config(config: ConvexGenConfig) -> None:
    """Check cross-field requirements the models cannot express.

    Raises:
        ConfigError: When `org` is empty or the Convex path does not exist.
    """
    if not config.org:
        raise ConfigError.missing_required("org", 'e.g. "@acme"')
    if not config.convex.path.exists():
        raise ConfigError.invalid_value(
            "convex.path", config.convex.path, "convex path does not exist"
        )


def write_default_config(path: Path, org: str) -> None:
    """Write a starter .convex-gen.json using the file's camelCase keys.

    Args:
        path: File to write.
        org: Package scope, e.g. "@acme".
    """
    defaults = ConvexGenConfig(org=org)
    data = {
        "org": org,
        "convex": {
            "path": defaults.convex.path.as_posix(),
            "structure": defaults.convex.structure,
            "fluentConvex": defaults.convex.fluent_convex,
        },
        "dataLayer": {
            "path": defaults.data_layer.path.as_posix(),
            "hooksDir": defaults.data_layer.hooks_dir,
            "apiDir": defaults.data_layer.api_dir,
            "typesDir": defaults.data_layer.types_dir,
            "fileStructure": defaults.data_layer.file_structure,
        },
        "imports": {"style": defaults.imports.style},
        "generators": defaults.generators.model_dump(),
        "skip": defaults.skip.model_dump(),
    }
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def load_config(
    root: Path | None = None,
    config_path: Path | None = None,
    **kwargs: Any,
) -> ConvexGenConfig:
    """Load config: defaults < config file < env vars < kwargs.

    Args:
        root: Project root. Relative paths resolve against it.
              Defaults to the current working directory.
        config_path: Explicit config file. Searched in `root` when omitted.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On a missing or unparsable file, or invalid values.
    """
    root = (root or Path.cwd()).resolve()
    path = config_path or find_config_file(root)
    file_config = _load_config_file(path)

    settings_cls = _make_settings_class(file_config)
    try:
        settings = settings_cls(**kwargs)
        config = ConvexGenConfig.model_validate(settings.model_dump())
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    config = apply_defaults(config, root)
    validate_config(config)
    return config
