"""Unicode ranges covered by the named font subsets."""

SUBSET_UNICODE_RANGES: dict[str, str] = {
    "cyrillic-ext": "U+0460-052F, U+1C80-1C88, U+20B4, U+2DE0-2DFF, U+A640-A69F, U+FE2E-FE2F",
    "cyrillic": "U+0400-045F, U+0490-0491, U+04B0-04B1, U+2116",
    "greek-ext": "U+1F00-1FFF",
    "greek": "U+0370-03FF",
    "latin-ext": (
        "U+0100-024F, U+0259, U+1E00-1EFF, U+2020, U+20A0-20AB, U+20AD-20CF, "
        "U+2113, U+2C60-2C7F, U+A720-A7FF"
    ),
    "latin": (
        "U+0000-00FF, U+0131, U+0152-0153, U+02BB-02BC, U+02C6, U+02DA, U+02DC, "
        "U+2000-206F, U+2074, U+20AC, U+2122, U+2191, U+2193, U+2212, U+2215, "
        "U+FEFF, U+FFFD"
    ),
}

# Keep every glyph when no known subset was requested
ALL_UNICODES = "*"


def unicode_range(subsets: list[str] | tuple[str, ...]) -> str:
    """
    Build the pyftsubset ``--unicodes`` value for a list of subsets.

    Unknown subset names contribute nothing.

    Args:
        subsets: Subset names such as "latin" or "cyrillic-ext"

    Returns:
        Comma separated Unicode ranges, or "*" when no subset is known
    """
    ranges = [SUBSET_UNICODE_RANGES[s] for s in subsets if s in SUBSET_UNICODE_RANGES]
    if not ranges:
        return ALL_UNICODES
    return ", ".join(ranges)
