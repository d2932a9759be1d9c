"""Configuration management for the font registry."""

from pathlib import Path

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fontsdb.core.exceptions import ConfigFileNotFoundError, InvalidConfigError
from fontsdb.core.http import DEFAULT_USER_AGENT

# Formats a variant can hold: ttf is the source, woff/woff2 can be generated
KNOWN_FORMATS = ("ttf", "woff2", "woff", "eot", "svg", "otf")
KNOWN_PROVIDERS = ("webfonts-helper", "google-fonts")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class FontsDbConfig(BaseSettings):
    """Font registry configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FONTSDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    fonts_path: Path = Field(Path("./fonts"), description="Registry root directory")
    formats: list[str] = Field(
        default_factory=lambda: ["ttf", "woff2", "woff"],
        description="Formats every installed variant must provide",
    )
    providers: list[str] = Field(
        default_factory=lambda: ["webfonts-helper"],
        description="Remote providers, queried in order",
    )
    google_fonts_api_key: str | None = Field(
        None, description="Google Fonts Developer API key", repr=False
    )

    # HTTP
    request_timeout: int = Field(30, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(True, description="Verify SSL certificates")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="HTTP User-Agent header")

    # Conversion
    subsetter_command: str = Field("pyftsubset", description="fontTools subsetter binary")
    subsetter_timeout: int = Field(120, gt=0, description="Subsetter timeout in seconds")

    file_mode: int = Field(0o755, ge=0, le=0o777, description="Permissions of written files")
    log_level: str = Field("INFO", description="Log level")

    @field_validator("formats")
    @classmethod
    def validate_formats(cls, v):
        """Normalize format names, ttf being mandatory."""
        formats = []
        for fmt in v:
            fmt = str(fmt).strip().lstrip(".").lower()
            if fmt not in KNOWN_FORMATS:
                raise ValueError(f"Unknown format '{fmt}', expected one of {', '.join(KNOWN_FORMATS)}")
            if fmt not in formats:
                formats.append(fmt)
        if "ttf" not in formats:
            raise ValueError("ttf format is required")
        return formats

    @field_validator("providers")
    @classmethod
    def validate_providers(cls, v):
        providers = []
        for name in v:
            name = str(name).strip().lower()
            if name not in KNOWN_PROVIDERS:
                raise ValueError(
                    f"Unknown provider '{name}', expected one of {', '.join(KNOWN_PROVIDERS)}"
                )
            if name not in providers:
                providers.append(name)
        return providers

    @field_validator("google_fonts_api_key")
    @classmethod
    def validate_api_key(cls, v):
        if v is None:
            return None
        return v.strip() or None

    @field_validator("file_mode", mode="before")
    @classmethod
    def parse_file_mode(cls, v):
        """Read string modes ("755", "0o644") as octal."""
        if isinstance(v, str):
            try:
                return int(v.strip().lower().removeprefix("0o"), 8)
            except ValueError as e:
                raise ValueError(f"Invalid file mode '{v}'") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level '{v}'")
        return level

    def to_safe_dict(self) -> dict:
        """Export configuration with sensitive fields masked."""
        config_dict = self.model_dump()
        if config_dict["google_fonts_api_key"]:
            config_dict["google_fonts_api_key"] = "***MASKED***"
        return config_dict

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "FontsDbConfig":
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)

    @classmethod
    def from_env_and_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path = ".env"
    ) -> "FontsDbConfig":
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path:
            return cls.from_yaml(yaml_path)
        return cls(_env_file=env_file if Path(env_file).exists() else None)


def load_config_from_yaml(
    config_path: str | Path, config_class: type[FontsDbConfig] = FontsDbConfig
) -> FontsDbConfig:
    """
    Load configuration from YAML file.

    Raises:
        ConfigFileNotFoundError: If the file does not exist
        InvalidConfigError: If the file is empty, not valid YAML or holds invalid values
    """
    config_path = Path(config_path)

    if not config_path.is_file():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with config_path.open(encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfigError(str(config_path), f"invalid YAML: {e}") from e

    if config_data is None:
        raise InvalidConfigError(str(config_path), "empty configuration file")
    if not isinstance(config_data, dict):
        raise InvalidConfigError(str(config_path), "expected a mapping")

    try:
        # YAML values win over environment, the .env file is not read
        return config_class(_env_file=None, **config_data)
    except ValidationError as e:
        raise InvalidConfigError(str(config_path), str(e)) from e
