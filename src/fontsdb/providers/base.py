"""
Provider capability shared by the remote font catalogs.

Providers are independent classes; the registry only relies on this
protocol.
"""

import re
from typing import Any, Protocol, runtime_checkable

from fontsdb.fonts.models import FontDetails, FontRecord
from fontsdb.fonts.query import variant_id

_ITALIC_VARIANT = re.compile(r"^(\d{3})italic$")


@runtime_checkable
class FontProvider(Protocol):
    """Remote source of font metadata."""

    name: str

    def list(self) -> dict[str, FontRecord]:
        """
        List every font known to the provider.

        Returns:
            Coarse font records keyed by font id

        Raises:
            ProviderError: If the catalog cannot be fetched
        """
        ...

    def infos(self, font_id: str, family: str) -> FontDetails | None:
        """
        Get the detailed variants and files of one family.

        Returns:
            Font details, or None if the family is unknown to the provider
        """
        ...


def variant_params(variant: str) -> tuple[str, str, str]:
    """
    Split a provider variant name into weight, style and variant id.

    Args:
        variant: Provider variant name ("regular", "italic", "700", "700italic")

    Returns:
        Tuple of (weight, style, variant_id)
    """
    variant = str(variant or "").strip().lower()
    match = _ITALIC_VARIANT.match(variant)

    if variant in ("", "regular"):
        weight, style = "400", "normal"
    elif variant == "italic":
        weight, style = "400", "italic"
    elif match:
        weight, style = match.group(1), "italic"
    else:
        weight, style = variant, "normal"

    return weight, style, variant_id(weight, style)


def font_record(data: dict[str, Any], variants: list[str] | None = None) -> FontRecord:
    """Build a catalog record from a provider payload, dropping unknown keys."""
    return FontRecord(
        id=data.get("id") or "",
        family=data.get("family") or "",
        category=data.get("category"),
        version=data.get("version"),
        last_modified=data.get("lastModified"),
        variants=variants if variants is not None else data.get("variants"),
        subsets=data.get("subsets"),
    )
