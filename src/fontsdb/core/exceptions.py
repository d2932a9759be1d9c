"""Custom exceptions for the font registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fontsdb.fonts.query import FontQuery


class FontsDbError(Exception):
    """Base exception for all font registry errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class ConfigurationError(FontsDbError):
    """Exception raised for configuration errors."""


class StorageError(FontsDbError):
    """Exception raised for storage operation errors."""


class ProviderError(FontsDbError):
    """Exception raised when a remote font provider cannot be queried."""


class FontError(FontsDbError):
    """Exception raised for a font query that cannot be satisfied.

    Carries the normalized query so callers can report which family,
    weight, style and variant were requested.
    """

    error_message = "Font error"

    def __init__(self, message: str = "", query: FontQuery | None = None, details: Any | None = None):
        super().__init__(message or self.error_message, details)
        self.family = query.family if query else ""
        self.weight = query.weight if query else ""
        self.style = query.style if query else ""
        self.variant_id = query.variant_id if query else ""
        self.subsets = list(query.subsets) if query else []

    def font_error(self) -> str:
        """Render a multi-line diagnostic for the failed query."""
        data = [f"F: {self.family}"]
        if self.weight:
            data.append(f"W: {self.weight}")
        if self.style:
            data.append(f"S: {self.style}")
        if self.variant_id:
            data.append(f"V: {self.variant_id}")
        if self.subsets:
            data.append(f"U: {','.join(self.subsets)}")

        text = f"{self.error_message} .. {self}"
        if data:
            text += "\nData: " + " - ".join(data)
        return text


class FontNotAvailableError(FontError):
    """Exception raised when the font is unknown to the registry."""

    error_message = "Font not available"

    def __init__(
        self,
        message: str = "",
        query: FontQuery | None = None,
        distant_loaded: bool = False,
    ):
        super().__init__(message or "Font is not in the local database", query)
        self.distant_loaded = distant_loaded

    def font_error(self) -> str:
        text = super().font_error()
        if not self.distant_loaded:
            text += "\nTry to load with prefetch to check online availability"
        return text


class VariantNotAvailableError(FontError):
    """Exception raised when the font is known but the variant is not."""

    error_message = "Font variant not available"

    def __init__(
        self,
        message: str = "",
        query: FontQuery | None = None,
        available_variants: list[str] | None = None,
    ):
        super().__init__(message or "Variant is not available for this font", query)
        self.available_variants = list(available_variants or [])

    def font_error(self) -> str:
        text = super().font_error()
        if self.available_variants:
            text += "\nAvailable variants: " + ", ".join(self.available_variants)
        return text


class SubsetNotAvailableError(VariantNotAvailableError):
    """Exception raised when a requested subset is not declared by the font."""

    error_message = "Font subset not available"

    def __init__(
        self,
        query: FontQuery | None = None,
        missing_subsets: list[str] | None = None,
        available_variants: list[str] | None = None,
    ):
        self.missing_subsets = list(missing_subsets or [])
        super().__init__(
            f"Subset {', '.join(self.missing_subsets)} is not available",
            query,
            available_variants,
        )


class InstallationInconsistentError(FontError):
    """Exception raised when a variant is available but not properly installed."""

    error_message = "Font installation inconsistent"

    def __init__(self, message: str = "", query: FontQuery | None = None):
        super().__init__(message or "Font variant is not installed but is available", query)


class MissingFormatFileError(InstallationInconsistentError):
    """Exception raised when a required format file is missing."""

    error_message = "Font format file missing"

    def __init__(self, format: str, query: FontQuery | None = None):
        super().__init__(f"Missing {format} format file", query)
        self.format = format


class LocalFontError(FontError):
    """Exception raised when trying to install a user-supplied local font."""

    error_message = "Local font"

    def __init__(self, query: FontQuery | None = None):
        super().__init__("Font is local and cannot be installed ..", query)


class FontsPathNotFoundError(ConfigurationError):
    """Exception raised when the registry root directory does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Fonts folder not found in {path}")


class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class InvalidConfigError(ConfigurationError):
    """Exception raised when configuration content is empty or invalid."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid configuration in {config_path}: {error}")


class InvalidYamlError(StorageError):
    """Exception raised for invalid YAML content."""

    def __init__(self, path: str, error: str):
        super().__init__(f"Unable to parse the YAML file in {path} .. {error}")


class FileCopyError(StorageError):
    """Exception raised when a font file cannot be copied."""

    def __init__(self, source: str, target: str, error: str):
        super().__init__(f"Unable to copy {source} to {target}: {error}")
