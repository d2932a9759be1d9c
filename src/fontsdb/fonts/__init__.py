"""Font Registry Module
====================

Query normalization, font entities and the registry managing their
installation.
"""

from .converter import WoffConverter
from .models import Font, FontFace, FontRecord, FontVariant, VariantRecord
from .query import FontQuery, family_id, family_name, parse_query, variant_id
from .registry import FontsDb, QueryStatus
from .storage import FontStorage
from .subsets import unicode_range

__all__ = [
    "Font",
    "FontFace",
    "FontQuery",
    "FontRecord",
    "FontStorage",
    "FontVariant",
    "FontsDb",
    "QueryStatus",
    "VariantRecord",
    "WoffConverter",
    "family_id",
    "family_name",
    "parse_query",
    "unicode_range",
    "variant_id",
]
