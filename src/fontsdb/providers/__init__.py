"""Remote font metadata providers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests

from .base import FontProvider, font_record, variant_params
from .google_fonts import GoogleFontsProvider
from .webfonts_helper import WebfontsHelperProvider

if TYPE_CHECKING:
    from fontsdb.core.config import FontsDbConfig

logger = logging.getLogger(__name__)

PROVIDER_NAMES = (WebfontsHelperProvider.name, GoogleFontsProvider.name)


def build_providers(
    config: FontsDbConfig, session: requests.Session | None = None
) -> list[FontProvider]:
    """
    Create the providers enabled in the configuration, in configured order.

    Args:
        config: Registry configuration
        session: Shared HTTP session

    Returns:
        List of providers
    """
    providers: list[FontProvider] = []

    for name in config.providers:
        if name == WebfontsHelperProvider.name:
            providers.append(
                WebfontsHelperProvider(session=session, timeout=config.request_timeout)
            )
        elif name == GoogleFontsProvider.name:
            if not config.google_fonts_api_key:
                logger.warning(f"Provider {name} skipped: no Google Fonts API key configured")
                continue
            providers.append(
                GoogleFontsProvider(
                    config.google_fonts_api_key,
                    session=session,
                    timeout=config.request_timeout,
                )
            )
        else:
            logger.warning(f"Unknown provider {name} ignored")

    return providers


__all__ = [
    "PROVIDER_NAMES",
    "FontProvider",
    "GoogleFontsProvider",
    "WebfontsHelperProvider",
    "build_providers",
    "font_record",
    "variant_params",
]
