"""
Google Fonts Provider
=====================

Font catalog from the Google Fonts Developer API. Only TTF files are served,
web formats are generated locally.
"""

from __future__ import annotations

import logging

import requests

from fontsdb.core.exceptions import ProviderError
from fontsdb.core.http import create_session
from fontsdb.fonts.models import FontDetails, FontRecord, VariantDetails

from .base import font_record, variant_params

logger = logging.getLogger(__name__)

GOOGLE_FONTS_API_URL = "https://www.googleapis.com/webfonts/v1/webfonts"


class GoogleFontsProvider:
    """Google Fonts Developer API client."""

    name = "google-fonts"

    def __init__(
        self,
        api_key: str,
        session: requests.Session | None = None,
        timeout: int = 30,
        api_url: str = GOOGLE_FONTS_API_URL,
    ):
        if not api_key:
            raise ValueError("Google Fonts API key is required")
        self.api_key = api_key
        self.session = session or create_session()
        self.timeout = timeout
        self.api_url = api_url

    def __repr__(self) -> str:
        return f"GoogleFontsProvider(api_url='{self.api_url}', api_key='***')"

    def _fetch(self, **params) -> dict:
        response = self.session.get(
            self.api_url,
            params={"key": self.api_key, **params},
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected response type {type(data).__name__}")
        return data

    def list(self) -> dict[str, FontRecord]:
        try:
            data = self._fetch()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(f"Error updating font list from {self.api_url}: {e}") from e

        fonts = {}
        for item in data.get("items") or []:
            if not item.get("family"):
                continue
            variants = [variant_params(v)[2] for v in item.get("variants") or []]
            record = font_record(item, variants)
            fonts[record.id] = record

        logger.debug(f"{self.name}: {len(fonts)} fonts listed")
        return fonts

    def infos(self, font_id: str, family: str) -> FontDetails | None:
        try:
            data = self._fetch(family=family)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"{self.name}: unable to fetch {family}: {e}")
            return None

        items = data.get("items") or []
        if not items or not items[0].get("files"):
            return None

        item = items[0]
        font_variants = {}
        for name, url in item["files"].items():
            weight, style, vid = variant_params(name)
            font_variants[vid] = VariantDetails(
                id=vid,
                family=family,
                weight=weight,
                style=style,
                files={"ttf": url},
            )

        record = font_record(item, list(font_variants))
        return FontDetails(**record.model_dump(), font_variants=font_variants)
