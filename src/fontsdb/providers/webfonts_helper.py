"""
google-webfonts-helper provider.

The helper API serves every Google font with ready made files in all web
formats, no API key required.
"""

from __future__ import annotations

import logging

import requests

from fontsdb.core.exceptions import ProviderError
from fontsdb.core.http import create_session
from fontsdb.fonts.models import FontDetails, FontRecord, VariantDetails

from .base import font_record, variant_params

logger = logging.getLogger(__name__)

WEBFONTS_HELPER_API_URL = "https://gwfh.mranftl.com/api/fonts"

# Formats published per variant
FILE_FORMATS = ("ttf", "woff", "woff2", "eot", "svg")


class WebfontsHelperProvider:
    """google-webfonts-helper API client."""

    name = "webfonts-helper"

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: int = 30,
        api_url: str = WEBFONTS_HELPER_API_URL,
    ):
        self.session = session or create_session()
        self.timeout = timeout
        self.api_url = api_url.rstrip("/")

    def _fetch(self, url: str):
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def list(self) -> dict[str, FontRecord]:
        try:
            items = self._fetch(self.api_url)
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(f"Error updating font list from {self.api_url}: {e}") from e

        if not isinstance(items, list):
            raise ProviderError(f"Unexpected font list from {self.api_url}")

        fonts = {}
        for item in items:
            if not isinstance(item, dict) or not item.get("family"):
                continue
            variants = [variant_params(v)[2] for v in item.get("variants") or []]
            record = font_record(item, variants)
            fonts[record.id] = record

        logger.debug(f"{self.name}: {len(fonts)} fonts listed")
        return fonts

    def infos(self, font_id: str, family: str) -> FontDetails | None:
        url = f"{self.api_url}/{font_id}"
        try:
            data = self._fetch(url)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"{self.name}: unable to fetch {family}: {e}")
            return None

        if not isinstance(data, dict) or not data.get("variants"):
            return None

        font_variants = {}
        for variant in data["variants"]:
            weight, style, vid = variant_params(str(variant.get("id") or ""))
            font_variants[vid] = VariantDetails(
                id=vid,
                family=family,
                weight=weight,
                style=style,
                files={fmt: variant[fmt] for fmt in FILE_FORMATS if variant.get(fmt)},
            )

        record = font_record({"id": font_id, "family": family, **data}, list(font_variants))
        return FontDetails(**record.model_dump(), font_variants=font_variants)
