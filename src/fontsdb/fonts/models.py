"""
Font data models and types.

``FontRecord`` / ``VariantRecord`` describe what is persisted in the YAML
files and what providers report; ``Font`` / ``FontVariant`` are the live
registry entities carrying installation state; ``FontFace`` is what the
registry serves to callers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fontsdb.core.exceptions import MissingFormatFileError, VariantNotAvailableError

from .query import family_id
from .subsets import unicode_range

if TYPE_CHECKING:
    from .converter import WoffConverter

logger = logging.getLogger(__name__)

# Formats the subsetter can generate from the TTF file
GENERATED_FORMATS = ("woff", "woff2")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class FontRecord(BaseModel):
    """Font entry of the persisted index, a font.yml file or a provider catalog."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = ""
    family: str
    local: bool = False
    category: str = ""
    version: str = ""
    last_modified: str = Field("", alias="lastModified")
    variants: list[str] = Field(default_factory=list)
    subsets: list[str] = Field(default_factory=list)

    @field_validator("id", "family", "category", "version", "last_modified", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)

    @field_validator("local", mode="before")
    @classmethod
    def coerce_local(cls, v):
        return False if v is None else v

    @field_validator("variants", "subsets", mode="before")
    @classmethod
    def coerce_text_list(cls, v):
        if v is None:
            return []
        return [_as_text(item) for item in v]

    @model_validator(mode="after")
    def derive_id(self) -> FontRecord:
        if not self.id and self.family:
            self.id = family_id(self.family)
        return self


class VariantRecord(BaseModel):
    """Variant entry of a per-variant font.yml file."""

    model_config = ConfigDict(extra="forbid")

    id: str = ""
    family: str = ""
    style: str = "normal"
    weight: str = ""
    display: str = ""
    # written by older versions, ignored
    filename: str | None = Field(None, exclude=True)

    @field_validator("id", "family", "weight", "display", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)

    @field_validator("style", mode="before")
    @classmethod
    def coerce_style(cls, v):
        return _as_text(v) or "normal"


class VariantDetails(VariantRecord):
    """Provider detail for one variant, with remote file URLs per format."""

    display: str = "swap"
    files: dict[str, str] = Field(default_factory=dict)


class FontDetails(FontRecord):
    """Provider detail for one family."""

    font_variants: dict[str, VariantDetails] = Field(default_factory=dict)


class FontFace(BaseModel):
    """Installed font variant as served to callers."""

    id: str
    variant: str
    family: str
    style: str
    weight: str
    display: str
    version: str = ""
    local: bool = False
    files: dict[str, Path] = Field(default_factory=dict)


@dataclass
class FontVariant:
    """One weight/style variant of a font family."""

    id: str
    family: str = ""
    style: str = "normal"
    weight: str = ""
    display: str = ""
    installed: bool = False
    files: dict[str, str] = field(default_factory=dict)
    base_path: Path = field(default_factory=Path)
    # directory name when it differs from the id
    folder: str = ""

    @classmethod
    def from_record(cls, record: VariantRecord, family: str = "") -> FontVariant:
        """Create a variant from a persisted or provider record."""
        return cls(
            id=record.id,
            family=record.family or family,
            style=record.style,
            weight=record.weight,
            display=record.display,
        )

    @property
    def path(self) -> Path:
        """Variant directory."""
        return self.base_path / (self.folder or self.id)

    def has_file(self, ext: str) -> bool:
        return bool(self.files.get(ext))

    def add_file(self, ext: str, filename: str) -> None:
        self.files[ext] = filename

    def check(
        self,
        font_id: str,
        formats: list[str],
        subsets: list[str] | tuple[str, ...] = (),
        converter: WoffConverter | None = None,
    ) -> None:
        """
        Check the variant files, generating web formats when possible.

        - has at least a TTF file
        - create the woff/woff2 files if missing and required
        - check all required formats are present

        Raises:
            MissingFormatFileError: If a required format file is missing
        """
        if not self.has_file("ttf"):
            raise MissingFormatFileError("ttf")

        filename = f"{font_id}-{self.id}"

        for flavor in GENERATED_FORMATS:
            if flavor not in formats or self.has_file(flavor) or converter is None:
                continue

            target = self.path / f"{filename}.{flavor}"
            if converter.convert(
                self.path / self.files["ttf"], target, unicode_range(subsets), flavor
            ):
                self.add_file(flavor, target.name)
            else:
                logger.warning(f"Could not generate {target.name}")

        for fmt in formats:
            if not self.has_file(fmt):
                raise MissingFormatFileError(fmt)

        self.installed = True

    def try_check(
        self,
        font_id: str,
        formats: list[str],
        subsets: list[str] | tuple[str, ...] = (),
        converter: WoffConverter | None = None,
    ) -> bool:
        """Same as check() but reports the outcome instead of raising."""
        try:
            self.check(font_id, formats, subsets, converter)
        except MissingFormatFileError as e:
            logger.debug(f"Variant {font_id}/{self.id} incomplete: {e}")
            return False
        return True

    def to_face(self) -> FontFace:
        return FontFace(
            id=self.id,
            variant=self.id,
            family=self.family,
            style=self.style,
            weight=self.weight,
            display=self.display,
            files={fmt: self.path / filename for fmt, filename in self.files.items()},
        )

    def to_file(self) -> dict[str, str]:
        """Data written to the variant font.yml."""
        data = {"id": self.id, "family": self.family}
        if self.style:
            data["style"] = self.style
        if self.weight:
            data["weight"] = self.weight
        if self.display:
            data["display"] = self.display
        return data


@dataclass
class Font:
    """A font family with its known and installed variants."""

    family: str
    id: str = ""
    category: str = ""
    version: str = ""
    last_modified: str = ""
    local: bool = False
    subsets: list[str] = field(default_factory=list)
    variants: list[str] = field(default_factory=list)
    installed: bool = False
    base_path: Path = field(default_factory=Path)
    font_variants: dict[str, FontVariant] = field(default_factory=dict)

    def __post_init__(self):
        if not self.id and self.family:
            self.id = family_id(self.family)
        self.variants = list(dict.fromkeys(self.variants))

    @classmethod
    def from_record(cls, record: FontRecord, base_path: Path) -> Font:
        """Create a font from a persisted or provider record."""
        return cls(
            id=record.id,
            family=record.family,
            category=record.category,
            version=record.version or "V1",
            last_modified=record.last_modified,
            local=record.local,
            subsets=list(record.subsets),
            variants=list(record.variants),
            base_path=base_path,
        )

    @property
    def path(self) -> Path:
        """Font directory."""
        return self.base_path / self.id

    @property
    def available_variants(self) -> list[str]:
        return list(self.variants)

    @property
    def installed_variants(self) -> list[str]:
        return [vid for vid, variant in self.font_variants.items() if variant.installed]

    def missing_subsets(self, subsets: list[str] | tuple[str, ...]) -> list[str]:
        """Requested subsets the font does not declare.

        A font without subsets (glyph or icon fonts) accepts any request.
        """
        if not self.subsets:
            return []
        return [subset for subset in subsets if subset not in self.subsets]

    def supports_subsets(self, subsets: list[str] | tuple[str, ...]) -> bool:
        return not self.missing_subsets(subsets)

    def add_subsets(self, subsets: list[str]) -> None:
        for subset in subsets:
            if subset not in self.subsets:
                self.subsets.append(subset)

    def add_variant(self, variant_id: str) -> None:
        if variant_id not in self.variants:
            self.variants.append(variant_id)

    def has_variant(self, variant_id: str) -> bool:
        return variant_id in self.variants

    def add_font_variant(self, font_variant: FontVariant) -> None:
        font_variant.base_path = self.path
        self.add_variant(font_variant.id)
        self.font_variants[font_variant.id] = font_variant

    def has_font_variant(self, variant_id: str) -> bool:
        return variant_id in self.font_variants

    def get_font_variant(self, variant_id: str) -> FontVariant:
        try:
            return self.font_variants[variant_id]
        except KeyError:
            raise VariantNotAvailableError(
                f"Variant {variant_id} is not installed for {self.family}",
                available_variants=self.available_variants,
            ) from None

    def to_face(self, variant_id: str) -> FontFace:
        face = self.get_font_variant(variant_id).to_face()
        return face.model_copy(
            update={
                "id": self.id,
                "family": face.family or self.family,
                "version": self.version,
                "local": self.local,
            }
        )

    def to_file(self) -> dict[str, Any]:
        """Data written to the font font.yml."""
        data: dict[str, Any] = {"id": self.id, "family": self.family}
        if self.local:
            data["local"] = True
        if self.category:
            data["category"] = self.category
        if self.version:
            data["version"] = self.version
        if self.last_modified:
            data["lastModified"] = self.last_modified
        return data

    def to_storage(self) -> dict[str, Any]:
        """Entry written to the persisted fonts.yml index."""
        data: dict[str, Any] = {}
        if self.local:
            data["local"] = True
        data["id"] = self.id
        data["family"] = self.family
        data["category"] = self.category
        data["version"] = self.version
        data["lastModified"] = self.last_modified
        data["variants"] = list(self.variants)
        if self.subsets:
            data["subsets"] = list(self.subsets)
        return data
