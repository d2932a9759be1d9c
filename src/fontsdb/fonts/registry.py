"""
Font Registry
=============

Local database of installed fonts, lazily populated from remote providers.

The registry root holds one directory per font and one sub-directory per
variant::

    <root>/fonts.yml
    <root>/<font_id>/font.yml
    <root>/<font_id>/<variant_id>/font.yml
    <root>/<font_id>/<variant_id>/<font_id>-<variant_id>.<ext>
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from pydantic import ValidationError

from fontsdb.core.exceptions import (
    FontNotAvailableError,
    FontsDbError,
    FontsPathNotFoundError,
    InstallationInconsistentError,
    InvalidYamlError,
    LocalFontError,
    MissingFormatFileError,
    ProviderError,
    SubsetNotAvailableError,
    VariantNotAvailableError,
)
from fontsdb.core.http import create_session

from .converter import WoffConverter
from .models import Font, FontDetails, FontFace, FontRecord, FontVariant, VariantRecord
from .query import FontQuery, parse_query, variant_id
from .storage import FontStorage

if TYPE_CHECKING:
    from fontsdb.core.config import FontsDbConfig
    from fontsdb.providers import FontProvider

logger = logging.getLogger(__name__)

DEFAULT_FORMATS = ("ttf", "woff2", "woff")
INDEX_FILE = "fonts.yml"
FONT_FILE = "font.yml"


class QueryStatus(Enum):
    """Outcome of probing a query against the registry."""

    UNKNOWN_FONT = "unknown_font"
    VARIANT_NOT_AVAILABLE = "variant_not_available"
    SUBSET_NOT_AVAILABLE = "subset_not_available"
    NOT_INSTALLED = "not_installed"
    MISSING_FILES = "missing_files"
    INSTALLED = "installed"


class _Probe(NamedTuple):
    status: QueryStatus
    font: Font | None = None
    missing: list[str] | None = None


class FontsDb:
    """
    Font registry.

    Use it as a context manager, or call ``close()`` when done, so that the
    installed fonts are persisted::

        with FontsDb("./fonts", providers=[WebfontsHelperProvider()]) as db:
            db.load()
            db.install("Roboto", 700)
            face = db.get("Roboto", 700)
    """

    def __init__(
        self,
        fonts_path: str | Path,
        formats: list[str] | tuple[str, ...] = DEFAULT_FORMATS,
        providers: list[FontProvider] | None = None,
        storage: FontStorage | None = None,
        converter: WoffConverter | None = None,
    ):
        """
        Initialize the registry.

        Args:
            fonts_path: Registry root directory
            formats: Formats every installed variant must provide
            providers: Remote providers, queried in order
            storage: Filesystem collaborator
            converter: TTF to WOFF/WOFF2 converter
        """
        self.fonts_path = Path(fonts_path).expanduser().absolute()
        self.formats = list(formats)
        self.providers: list[FontProvider] = list(providers or [])
        self.storage = storage or FontStorage()
        self.converter = converter or WoffConverter()

        self._fonts: dict[str, Font] = {}
        self._distant_loaded = False

    @classmethod
    def from_config(cls, config: FontsDbConfig) -> FontsDb:
        """Create a registry with storage, converter and providers from configuration."""
        from fontsdb.providers import build_providers

        session = create_session(config.user_agent, config.verify_ssl)
        storage = FontStorage(
            file_mode=config.file_mode, session=session, timeout=config.request_timeout
        )
        converter = WoffConverter(
            command=config.subsetter_command,
            timeout=config.subsetter_timeout,
            file_mode=config.file_mode,
        )
        return cls(
            config.fonts_path,
            formats=config.formats,
            providers=build_providers(config, session),
            storage=storage,
            converter=converter,
        )

    def __enter__(self) -> FontsDb:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.close()
            return

        # the error raised in the block wins over a failed save
        try:
            self.close()
        except FontsDbError as e:
            logger.error(f"Unable to save the registry after {exc_type.__name__}: {e}")

    def close(self) -> None:
        """Persist the registry."""
        self.save()

    def add_provider(self, provider: FontProvider) -> FontsDb:
        self.providers.append(provider)
        return self

    @property
    def fonts(self) -> dict[str, Font]:
        return self._fonts

    @property
    def distant_loaded(self) -> bool:
        """Whether provider catalogs have been merged."""
        return self._distant_loaded

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _probe(self, query: FontQuery) -> _Probe:
        font = self._fonts.get(query.id)
        if font is None:
            return _Probe(QueryStatus.UNKNOWN_FONT)

        if not font.has_variant(query.variant_id):
            return _Probe(QueryStatus.VARIANT_NOT_AVAILABLE, font)

        missing = font.missing_subsets(query.subsets)
        if missing:
            return _Probe(QueryStatus.SUBSET_NOT_AVAILABLE, font, missing)

        if not font.has_font_variant(query.variant_id):
            return _Probe(QueryStatus.NOT_INSTALLED, font)

        variant = font.get_font_variant(query.variant_id)
        try:
            variant.check(font.id, self.formats, query.subsets, self.converter)
        except MissingFormatFileError as e:
            return _Probe(QueryStatus.MISSING_FILES, font, [e.format])

        return _Probe(QueryStatus.INSTALLED, font)

    def status(
        self,
        family: str,
        weight: str | int | None = None,
        style: str | None = None,
        subsets: list[str] | None = None,
    ) -> QueryStatus:
        """Probe a query without raising."""
        return self._probe(parse_query(family, weight, style, subsets)).status

    def is_available(
        self,
        family: str,
        weight: str | int | None = None,
        style: str | None = None,
        subsets: list[str] | None = None,
    ) -> bool:
        """Font known, variant listed and subsets supported."""
        return self.status(family, weight, style, subsets) not in (
            QueryStatus.UNKNOWN_FONT,
            QueryStatus.VARIANT_NOT_AVAILABLE,
            QueryStatus.SUBSET_NOT_AVAILABLE,
        )

    def is_installed(
        self,
        family: str,
        weight: str | int | None = None,
        style: str | None = None,
        subsets: list[str] | None = None,
    ) -> bool:
        """Available and every configured format file present."""
        return self.status(family, weight, style, subsets) is QueryStatus.INSTALLED

    def has(
        self,
        family: str,
        weight: str | int | None = None,
        style: str | None = None,
        subsets: list[str] | None = None,
    ) -> bool:
        return self.is_installed(family, weight, style, subsets)

    def check(
        self,
        family: str,
        weight: str | int | None = None,
        style: str | None = None,
        subsets: list[str] | None = None,
    ) -> None:
        """
        Check the requested font variant is available and installed.

        Raises:
            FontNotAvailableError: Font unknown to the registry
            VariantNotAvailableError: Variant not listed for the font
            SubsetNotAvailableError: Requested subsets not declared by the font
            InstallationInconsistentError: Variant available but not installed
            MissingFormatFileError: Variant installed with missing format files
        """
        query = parse_query(family, weight, style, subsets)
        self._raise_for(query, self._probe(query))

    def _raise_for(self, query: FontQuery, probe: _Probe) -> None:
        if probe.status is QueryStatus.UNKNOWN_FONT:
            raise FontNotAvailableError(query=query, distant_loaded=self._distant_loaded)

        if probe.status is QueryStatus.VARIANT_NOT_AVAILABLE:
            raise VariantNotAvailableError(
                query=query, available_variants=probe.font.available_variants
            )

        if probe.status is QueryStatus.SUBSET_NOT_AVAILABLE:
            raise SubsetNotAvailableError(
                query=query,
                missing_subsets=probe.missing,
                available_variants=probe.font.available_variants,
            )

        if probe.status is QueryStatus.NOT_INSTALLED:
            raise InstallationInconsistentError(query=query)

        if probe.status is QueryStatus.MISSING_FILES:
            raise MissingFormatFileError(probe.missing[0], query=query)

    def get(
        self,
        family: str,
        weight: str | int | None = None,
        style: str | None = None,
        subsets: list[str] | None = None,
    ) -> FontFace | None:
        """
        Get the installed font variant.

        Returns:
            Font face with absolute file paths, or None if not installed
        """
        query = parse_query(family, weight, style, subsets)
        probe = self._probe(query)
        if probe.status is not QueryStatus.INSTALLED:
            return None
        return probe.font.to_face(query.variant_id)

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    def install(
        self,
        family: str,
        weight: str | int | None = None,
        style: str | None = None,
        subsets: list[str] | None = None,
    ) -> None:
        """
        Install a font variant from the providers.

        - skip if already installed
        - local fonts are never fetched
        - fetch the font details from the first answering provider
        - copy the configured format files and generate the web formats
        - save the registry

        Raises:
            FontError: If the variant cannot be installed
            StorageError: If a file cannot be copied or saved
        """
        query = parse_query(family, weight, style, subsets)

        if self._probe(query).status is QueryStatus.INSTALLED:
            logger.debug(f"{query.id}/{query.variant_id} already installed")
            return

        font = self._fonts.get(query.id)

        if font is None and self._distant_loaded:
            raise FontNotAvailableError(
                "Font is not available via any provider ..", query, distant_loaded=True
            )

        if font is not None and font.local:
            raise LocalFontError(query)

        details = self._fetch_details(query, font.family if font is not None else query.family)
        if details is None:
            raise FontNotAvailableError(
                "Font is not available via any provider ..",
                query,
                distant_loaded=self._distant_loaded,
            )

        if font is None:
            font = self._create_font(details)
        self._merge_record(font, details)

        if query.variant_id not in details.font_variants:
            raise VariantNotAvailableError(
                query=query, available_variants=list(details.font_variants)
            )

        missing = font.missing_subsets(query.subsets)
        if missing:
            raise SubsetNotAvailableError(
                query=query, missing_subsets=missing, available_variants=font.available_variants
            )

        variant_details = details.font_variants[query.variant_id]

        if font.has_font_variant(query.variant_id):
            variant = font.get_font_variant(query.variant_id)
            if variant.try_check(font.id, self.formats, query.subsets, self.converter):
                self._mark_installed(font, variant)
                return
        else:
            variant = FontVariant.from_record(variant_details, font.family)
            variant.base_path = font.path

        filename = f"{font.id}-{variant.id}"
        for ext, source in variant_details.files.items():
            if ext not in self.formats or variant.has_file(ext):
                continue
            target = variant.path / f"{filename}.{ext}"
            logger.info(f"Downloading {target.name}")
            self.storage.copy(source, target)
            variant.add_file(ext, target.name)

        try:
            variant.check(font.id, self.formats, query.subsets, self.converter)
        except MissingFormatFileError as e:
            raise MissingFormatFileError(e.format, query=query) from e

        self._mark_installed(font, variant)
        logger.info(f"Installed {font.family} {variant.id}")

    def _fetch_details(self, query: FontQuery, family: str) -> FontDetails | None:
        for provider in self.providers:
            details = provider.infos(query.id, family)
            if details is not None:
                logger.debug(f"{query.id} found on {provider.name}")
                return details
        return None

    def _mark_installed(self, font: Font, variant: FontVariant) -> None:
        font.add_font_variant(variant)
        variant.installed = True
        font.installed = True
        self.save()

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load(self, prefetch: bool = False) -> FontsDb:
        """
        Load the registry.

        Args:
            prefetch: Also merge every provider catalog

        Raises:
            FontsPathNotFoundError: If the registry root is not a directory
        """
        if not self.fonts_path.is_dir():
            raise FontsPathNotFoundError(str(self.fonts_path))

        self._load_index()
        self._load_folders()

        if prefetch:
            self._load_providers()

        installed = sum(1 for font in self._fonts.values() if font.installed)
        logger.info(f"Loaded {len(self._fonts)} fonts, {installed} installed")

        self.save()
        return self

    def _load_index(self) -> None:
        path = self.fonts_path / INDEX_FILE
        data = self.storage.read_yaml(path) or []
        if not isinstance(data, list):
            raise InvalidYamlError(str(path), "expected a list of fonts")

        for entry in data:
            try:
                record = FontRecord.model_validate(entry)
            except ValidationError as e:
                raise InvalidYamlError(str(path), str(e)) from e
            self._create_font(record)

    def _load_folders(self) -> None:
        for font_dir in sorted(self.fonts_path.iterdir()):
            if not font_dir.is_dir() or font_dir.name.startswith("."):
                continue

            record = self._read_record(font_dir / FONT_FILE, FontRecord)
            if record is None:
                continue

            font = self._create_font(record)

            for variant_dir in sorted(font_dir.iterdir()):
                if not variant_dir.is_dir():
                    continue

                variant_record = self._read_record(variant_dir / FONT_FILE, VariantRecord)
                if variant_record is None:
                    continue

                variant = self._scan_variant(variant_dir, variant_record, font)
                font.add_font_variant(variant)

                if variant.try_check(font.id, self.formats, converter=self.converter):
                    font.installed = True

    def _read_record(self, path: Path, model: type[FontRecord] | type[VariantRecord]):
        data = self.storage.read_yaml(path)
        if not data:
            return None
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise InvalidYamlError(str(path), str(e)) from e

    def _scan_variant(self, variant_dir: Path, record: VariantRecord, font: Font) -> FontVariant:
        if not record.id:
            record.id = variant_id(record.weight, record.style)

        variant = FontVariant.from_record(record, font.family)
        if variant_dir.name != variant.id:
            variant.folder = variant_dir.name
        for path in sorted(variant_dir.iterdir()):
            if not path.is_file() or path.name == FONT_FILE or path.name.startswith("."):
                continue
            if path.suffix:
                variant.add_file(path.suffix[1:].lower(), path.name)
        return variant

    def _load_providers(self) -> None:
        if self._distant_loaded:
            return

        loaded = False
        for provider in self.providers:
            try:
                records = provider.list()
            except ProviderError as e:
                logger.warning(f"{provider.name}: {e}")
                continue

            for record in records.values():
                font = self._fonts.get(record.id)
                if font is None:
                    self._create_font(record)
                else:
                    self._merge_record(font, record)

            logger.info(f"Merged {len(records)} fonts from {provider.name}")
            loaded = True

        self._distant_loaded = loaded

    def _merge_record(self, font: Font, record: FontRecord) -> None:
        for vid in record.variants:
            font.add_variant(vid)
        if not font.subsets:
            font.add_subsets(record.subsets)

    def _create_font(self, record: FontRecord) -> Font:
        if record.id in self._fonts:
            return self._fonts[record.id]

        font = Font.from_record(record, self.fonts_path)
        self._fonts[font.id] = font
        return font

    def save(self) -> None:
        """
        Persist the installed fonts.

        Raises:
            StorageError: If a file cannot be written
        """
        index = []
        for font in self._fonts.values():
            if not font.installed:
                continue

            index.append(font.to_storage())
            self.storage.dump_yaml(font.path / FONT_FILE, font.to_file())

            for variant in font.font_variants.values():
                if variant.installed:
                    self.storage.dump_yaml(variant.path / FONT_FILE, variant.to_file())

        self.storage.dump_yaml(self.fonts_path / INDEX_FILE, index)
        logger.debug(f"Saved {len(index)} fonts to {self.fonts_path / INDEX_FILE}")
