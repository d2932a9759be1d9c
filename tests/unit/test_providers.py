"""Tests for the remote font providers."""

from unittest.mock import Mock

import pytest
import requests

from fontsdb.core.config import FontsDbConfig
from fontsdb.core.exceptions import ProviderError
from fontsdb.providers import (
    FontProvider,
    GoogleFontsProvider,
    WebfontsHelperProvider,
    build_providers,
    variant_params,
)

GOOGLE_ITEM = {
    "kind": "webfonts#webfont",
    "family": "Open Sans",
    "category": "sans-serif",
    "variants": ["300", "regular", "italic", "700italic"],
    "subsets": ["latin", "cyrillic"],
    "version": "v34",
    "lastModified": "2022-09-22",
    "files": {
        "300": "https://fonts.gstatic.com/s/opensans/v34/open-sans-300.ttf",
        "regular": "https://fonts.gstatic.com/s/opensans/v34/open-sans-regular.ttf",
        "italic": "https://fonts.gstatic.com/s/opensans/v34/open-sans-italic.ttf",
        "700italic": "https://fonts.gstatic.com/s/opensans/v34/open-sans-700italic.ttf",
    },
}

HELPER_FONT = {
    "id": "open-sans",
    "family": "Open Sans",
    "variants": ["300", "regular", "italic"],
    "subsets": ["latin", "cyrillic"],
    "category": "sans-serif",
    "version": "v34",
    "lastModified": "2022-09-22",
    "popularity": 2,
    "defSubset": "latin",
    "defVariant": "regular",
}


def mock_session(payload=None, error=None):
    """Session whose GET returns the payload or raises the error."""
    session = Mock(spec=requests.Session)
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return session


class TestVariantParams:
    """Test provider variant name parsing."""

    @pytest.mark.parametrize(
        "variant,expected",
        [
            ("regular", ("400", "normal", "regular")),
            ("", ("400", "normal", "regular")),
            ("italic", ("400", "italic", "italic")),
            ("700italic", ("700", "italic", "700italic")),
            ("300", ("300", "normal", "300")),
        ],
    )
    def test_variant_params(self, variant, expected):
        assert variant_params(variant) == expected


class TestGoogleFontsProvider:
    """Test GoogleFontsProvider."""

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            GoogleFontsProvider("")

    def test_repr_masks_key(self):
        provider = GoogleFontsProvider("secret-key", session=mock_session())

        assert "secret-key" not in repr(provider)
        assert isinstance(provider, FontProvider)

    def test_list(self):
        session = mock_session({"kind": "webfonts#webfontList", "items": [GOOGLE_ITEM]})
        provider = GoogleFontsProvider("key", session=session, timeout=5)

        fonts = provider.list()

        assert list(fonts) == ["open-sans"]
        record = fonts["open-sans"]
        assert record.family == "Open Sans"
        assert record.variants == ["300", "regular", "italic", "700italic"]
        assert record.last_modified == "2022-09-22"
        session.get.assert_called_once_with(
            "https://www.googleapis.com/webfonts/v1/webfonts",
            params={"key": "key"},
            timeout=5,
        )

    def test_list_failure(self):
        session = mock_session(error=requests.ConnectionError("offline"))
        provider = GoogleFontsProvider("key", session=session)

        with pytest.raises(ProviderError):
            provider.list()

    def test_infos(self):
        session = mock_session({"items": [GOOGLE_ITEM]})
        provider = GoogleFontsProvider("key", session=session)

        details = provider.infos("open-sans", "Open Sans")

        assert details.id == "open-sans"
        assert details.variants == ["300", "regular", "italic", "700italic"]
        variant = details.font_variants["700italic"]
        assert variant.weight == "700"
        assert variant.style == "italic"
        assert variant.display == "swap"
        assert variant.files == {"ttf": GOOGLE_ITEM["files"]["700italic"]}
        assert session.get.call_args.kwargs["params"] == {"key": "key", "family": "Open Sans"}

    def test_infos_unknown_family(self):
        provider = GoogleFontsProvider("key", session=mock_session({"items": []}))

        assert provider.infos("nope", "Nope") is None

    def test_infos_transport_error(self):
        session = mock_session(error=requests.Timeout("slow"))
        provider = GoogleFontsProvider("key", session=session)

        assert provider.infos("open-sans", "Open Sans") is None


class TestWebfontsHelperProvider:
    """Test WebfontsHelperProvider."""

    def test_list(self):
        session = mock_session([HELPER_FONT, {"id": "broken"}])
        provider = WebfontsHelperProvider(session=session)

        fonts = provider.list()

        assert list(fonts) == ["open-sans"]
        assert fonts["open-sans"].subsets == ["latin", "cyrillic"]
        session.get.assert_called_once_with("https://gwfh.mranftl.com/api/fonts", timeout=30)

    def test_list_unexpected_payload(self):
        provider = WebfontsHelperProvider(session=mock_session({"error": "nope"}))

        with pytest.raises(ProviderError):
            provider.list()

    def test_infos(self):
        payload = dict(HELPER_FONT)
        payload["variants"] = [
            {
                "id": "regular",
                "fontFamily": "'Open Sans'",
                "fontStyle": "normal",
                "fontWeight": "400",
                "ttf": "https://gwfh.mranftl.com/open-sans-regular.ttf",
                "woff": "https://gwfh.mranftl.com/open-sans-regular.woff",
                "woff2": "https://gwfh.mranftl.com/open-sans-regular.woff2",
                "svg": "",
            },
            {
                "id": "300italic",
                "fontFamily": "'Open Sans'",
                "fontStyle": "italic",
                "fontWeight": "300",
                "ttf": "https://gwfh.mranftl.com/open-sans-300italic.ttf",
            },
        ]
        session = mock_session(payload)
        provider = WebfontsHelperProvider(session=session)

        details = provider.infos("open-sans", "Open Sans")

        session.get.assert_called_once_with(
            "https://gwfh.mranftl.com/api/fonts/open-sans", timeout=30
        )
        assert details.variants == ["regular", "300italic"]
        assert set(details.font_variants["regular"].files) == {"ttf", "woff", "woff2"}
        assert details.font_variants["300italic"].weight == "300"
        assert details.subsets == ["latin", "cyrillic"]

    def test_infos_without_variants(self):
        provider = WebfontsHelperProvider(session=mock_session({"id": "open-sans"}))

        assert provider.infos("open-sans", "Open Sans") is None

    def test_infos_http_error(self):
        session = mock_session(error=requests.HTTPError("404"))
        provider = WebfontsHelperProvider(session=session)

        assert provider.infos("nope", "Nope") is None


class TestBuildProviders:
    """Test provider construction from configuration."""

    def test_default_providers(self):
        config = FontsDbConfig(_env_file=None)

        providers = build_providers(config, session=mock_session())

        assert [p.name for p in providers] == ["webfonts-helper"]

    def test_google_fonts_needs_key(self):
        config = FontsDbConfig(_env_file=None, providers=["google-fonts", "webfonts-helper"])

        providers = build_providers(config, session=mock_session())

        assert [p.name for p in providers] == ["webfonts-helper"]

    def test_configured_order(self):
        config = FontsDbConfig(
            _env_file=None,
            providers=["google-fonts", "webfonts-helper"],
            google_fonts_api_key="key",
            request_timeout=10,
        )

        providers = build_providers(config, session=mock_session())

        assert [p.name for p in providers] == ["google-fonts", "webfonts-helper"]
        assert providers[0].timeout == 10
