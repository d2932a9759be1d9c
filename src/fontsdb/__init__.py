"""Font Registry
=============

Resolves loosely specified font queries ("Roboto/700italic@latin") into
locally installed font files, fetched on demand from remote providers and
converted to web formats.
"""

__version__ = "1.0.0"
__author__ = "fontsdb developers"

from .core.config import FontsDbConfig
from .core.exceptions import (
    FontError,
    FontNotAvailableError,
    FontsDbError,
    VariantNotAvailableError,
)
from .fonts import FontFace, FontsDb, parse_query

__all__ = [
    "FontError",
    "FontFace",
    "FontNotAvailableError",
    "FontsDb",
    "FontsDbConfig",
    "FontsDbError",
    "VariantNotAvailableError",
    "parse_query",
]
