"""
Pytest configuration and fixtures for font registry tests.
"""

import tempfile
from pathlib import Path

import pytest

from fontsdb.fonts.models import FontDetails, FontRecord, VariantDetails
from fontsdb.fonts.storage import FontStorage
from fontsdb.providers.base import variant_params


class FakeConverter:
    """Converter writing placeholder web font files."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.calls = []

    def convert(self, ttf_path, target_path, unicodes, flavor):
        self.calls.append((Path(ttf_path), Path(target_path), unicodes, flavor))
        if not self.succeed:
            return False
        Path(target_path).write_bytes(b"wOFF" if flavor == "woff" else b"wOF2")
        return True


class FakeProvider:
    """In-memory provider recording every call."""

    def __init__(self, name="fake", catalog=None, details=None):
        self.name = name
        self.catalog = catalog or {}
        self.details = details or {}
        self.list_calls = 0
        self.infos_calls = []

    def list(self):
        self.list_calls += 1
        return dict(self.catalog)

    def infos(self, font_id, family):
        self.infos_calls.append((font_id, family))
        return self.details.get(font_id)


def make_details(
    family: str,
    variants: list[str],
    source_dir: Path,
    subsets: list[str] | None = None,
    formats: tuple[str, ...] = ("ttf",),
) -> FontDetails:
    """Build provider details whose files point at local placeholder fonts."""
    font_variants = {}
    for name in variants:
        weight, style, vid = variant_params(name)
        files = {}
        for fmt in formats:
            source = source_dir / f"{family.lower().replace(' ', '-')}-{vid}.{fmt}"
            source.write_bytes(b"\x00\x01\x00\x00" + vid.encode())
            files[fmt] = str(source)
        font_variants[vid] = VariantDetails(
            id=vid, family=family, weight=weight, style=style, files=files
        )

    return FontDetails(
        family=family,
        category="sans-serif",
        version="v30",
        last_modified="2022-09-22",
        variants=list(font_variants),
        subsets=subsets or ["latin", "latin-ext", "cyrillic"],
        font_variants=font_variants,
    )


def make_record(details: FontDetails) -> FontRecord:
    """Coarse catalog record of provider details."""
    return FontRecord(**details.model_dump(exclude={"font_variants"}))


@pytest.fixture
def temp_dir():
    """Create temporary directory."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def fonts_root(temp_dir):
    """Empty registry root."""
    root = temp_dir / "fonts"
    root.mkdir()
    return root


@pytest.fixture
def source_dir(temp_dir):
    """Directory holding the placeholder remote font files."""
    source = temp_dir / "remote"
    source.mkdir()
    return source


@pytest.fixture
def converter():
    return FakeConverter()


@pytest.fixture
def storage():
    return FontStorage(file_mode=0o644)


@pytest.fixture
def roboto_details(source_dir):
    """Roboto as reported by a provider."""
    return make_details("Roboto", ["regular", "italic", "700"], source_dir)


@pytest.fixture
def roboto_provider(roboto_details):
    """Provider knowing Roboto only."""
    return FakeProvider(
        catalog={"roboto": make_record(roboto_details)},
        details={"roboto": roboto_details},
    )


@pytest.fixture
def details_factory(source_dir):
    """Build provider details with placeholder files in the source directory."""

    def factory(family, variants, subsets=None, formats=("ttf",)):
        return make_details(family, variants, source_dir, subsets, formats)

    return factory


@pytest.fixture
def provider_factory():
    """Build a fake provider from a list of font details."""

    def factory(*details, name="fake"):
        return FakeProvider(
            name=name,
            catalog={d.id: make_record(d) for d in details},
            details={d.id: d for d in details},
        )

    return factory
