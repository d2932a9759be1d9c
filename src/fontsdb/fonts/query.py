"""
Font Query Normalization
========================

Maps loosely specified font queries such as ``"Roboto/700italic@latin"``,
``("Roboto", 800)`` or ``("montserrat", "light")`` onto a canonical
``(family, id, weight, style, variant_id, subsets)`` tuple.
"""

import re
import string
from typing import NamedTuple

WEIGHT_ALIASES: dict[str, str] = {
    "extralight": "100",
    "light": "300",
    "bold": "700",
    "extrabold": "900",
}

_ITALIC_WEIGHT = re.compile(r"^(.+)italic$")


class FontQuery(NamedTuple):
    """Canonical font query."""

    family: str
    id: str
    weight: str
    style: str
    variant_id: str
    subsets: tuple[str, ...]


def family_id(name: str) -> str:
    """Get the canonical font id for a family name (``Open Sans`` -> ``open-sans``)."""
    return name.strip().replace(" ", "-").lower()


def family_name(font_id: str) -> str:
    """Get the display family name for a font id (``open-sans`` -> ``Open Sans``)."""
    return string.capwords(family_id(font_id).replace("-", " "))


def variant_id(weight: str, style: str) -> str:
    """Compute the variant id for a weight/style pair.

    Args:
        weight: Numeric weight string, "" meaning regular
        style: "italic", "normal" or ""

    Returns:
        Variant id such as "regular", "italic", "700" or "700italic"
    """
    if style == "italic":
        if weight in ("", "400"):
            return "italic"
        return f"{weight}italic"

    if weight in ("", "400"):
        return "regular"

    return weight


def _split_subsets(raw: str) -> list[str]:
    subsets = []
    for subset in raw.split(","):
        subset = subset.strip().lower()
        if subset and subset not in subsets:
            subsets.append(subset)
    return subsets


def parse_query(
    family: str,
    weight: str | int | None = None,
    style: str | None = None,
    subsets: list[str] | tuple[str, ...] | None = None,
) -> FontQuery:
    """
    Normalize a raw font query.

    Args:
        family: Family name or id, optionally suffixed with ``/<weight>``
            and ``@<subset>,<subset>``
        weight: Weight as number, numeric string or alias (bold, light, ...)
        style: Font style, "italic" or "normal"
        subsets: Requested subsets, overridden by an ``@`` suffix

    Returns:
        Normalized FontQuery
    """
    family = str(family)

    # extract subsets from family
    if "@" in family:
        family, _, raw_subsets = family.partition("@")
        if raw_subsets:
            subsets = _split_subsets(raw_subsets)

    # extract variant from family
    if "/" in family:
        family, _, weight = family.partition("/")

    weight = "" if weight is None else str(weight).strip().lower()
    style = "" if style is None else str(style).strip().lower()

    if weight == "italic":
        weight = ""
        style = "italic"
    else:
        match = _ITALIC_WEIGHT.match(weight)
        if match:
            weight = match.group(1)
            style = "italic"

    if weight == "regular":
        weight = ""
        style = ""
    else:
        weight = WEIGHT_ALIASES.get(weight, weight)

    font_id = family_id(family)

    return FontQuery(
        family=family_name(font_id),
        id=font_id,
        weight=weight,
        style=style,
        variant_id=variant_id(weight, style),
        subsets=tuple(_split_subsets(",".join(subsets or []))),
    )
