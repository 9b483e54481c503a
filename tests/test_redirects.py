"""
Tests for redirect classification and normalization.
"""

import pytest

from socialnetwork.core.classifier import classify, raw_scheme
from socialnetwork.core.credentials import CredentialRegistry
from socialnetwork.core.domain import Classification, Provider, RedirectKind
from socialnetwork.core.exceptions import (
    InvalidStateError,
    MissingStateError,
    UnknownProviderError,
)
from socialnetwork.core.normalizer import normalize, normalize_native, normalize_web
from socialnetwork.oauth.config import StaticCredentialSource

VK_STATE = "%7B%22provider%22%3A%22vkontakte%22%7D"


class TestRawScheme:
    def test_keeps_case(self):
        assert raw_scheme("fbAbC://authorize") == "fbAbC"

    def test_no_scheme(self):
        assert raw_scheme("/just/a/path") is None


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize(
        "url,provider",
        [
            ("fb1234://authorize#access_token=XYZ", Provider.FACEBOOK),
            ("ok512://authorize#access_token=XYZ", Provider.ODNOKLASSNIKI),
            ("vk6543://authorize?#access_token=XYZ", Provider.VKONTAKTE),
        ],
    )
    def test_native_redirects(self, implicit_credentials, url, provider):
        assert classify(url, implicit_credentials) == Classification.native(provider)

    def test_native_scheme_is_case_sensitive(self):
        credentials = CredentialRegistry(
            {Provider.FACEBOOK: StaticCredentialSource(id="AbC")}
        )

        assert classify("fbAbC://authorize#a=b", credentials).kind is RedirectKind.NATIVE
        assert (
            classify("fbabc://authorize#a=b", credentials).kind
            is RedirectKind.UNRECOGNIZED
        )

    def test_native_requires_registered_source(self):
        credentials = CredentialRegistry()

        result = classify("fb1234://authorize#access_token=XYZ", credentials)

        assert result.kind is RedirectKind.UNRECOGNIZED

    def test_native_wrong_client_id(self, implicit_credentials):
        result = classify("fb9999://authorize#access_token=XYZ", implicit_credentials)

        assert result.kind is RedirectKind.UNRECOGNIZED

    @pytest.mark.parametrize(
        "url",
        [
            f"socialnetwork://auth/simplified?state={VK_STATE}&code=ABC",
            f"SocialNetwork://auth/Simplified?state={VK_STATE}",
            "socialnetwork://host/a/SIMPLIFIED/b",
        ],
    )
    def test_web_redirects(self, implicit_credentials, url):
        assert classify(url, implicit_credentials) == Classification.web()

    def test_web_check_does_not_depend_on_credentials(self):
        result = classify(f"socialnetwork://auth/simplified?state={VK_STATE}", CredentialRegistry())

        assert result.kind is RedirectKind.WEB

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/simplified?state=x",
            "socialnetwork://auth/other?state=x",
            "socialnetwork://simplified",
            "myapp://callback#access_token=XYZ",
            "not a url",
            "",
        ],
    )
    def test_unrecognized(self, implicit_credentials, url):
        result = classify(url, implicit_credentials)

        assert result == Classification.unrecognized()

    def test_native_checks_win_over_web_check(self):
        credentials = CredentialRegistry(
            {Provider.VKONTAKTE: StaticCredentialSource(id="socialnetwork")}
        )

        result = classify("vksocialnetwork://x/simplified?#a=b", credentials)

        assert result == Classification.native(Provider.VKONTAKTE)


class TestNormalizeNative:
    """Tests for native redirect normalization."""

    def test_facebook_fragment(self):
        parameters = normalize_native(
            "fb1234://authorize#access_token=XYZ", Provider.FACEBOOK
        )

        assert parameters == {"access_token": "XYZ"}

    def test_odnoklassniki_fragment(self):
        parameters = normalize_native(
            "ok512://authorize#access_token=XYZ&session_secret_key=S&expires_in=1800",
            Provider.ODNOKLASSNIKI,
        )

        assert parameters == {
            "access_token": "XYZ",
            "session_secret_key": "S",
            "expires_in": "1800",
        }

    def test_vkontakte_query_fragment(self):
        parameters = normalize_native(
            "vk6543://authorize?#access_token=XYZ&user_id=7", Provider.VKONTAKTE
        )

        assert parameters == {"access_token": "XYZ", "user_id": "7"}

    def test_vkontakte_ignores_plain_fragment(self):
        parameters = normalize_native(
            "vk6543://authorize#access_token=XYZ", Provider.VKONTAKTE
        )

        assert parameters == {}

    def test_percent_decoding(self):
        parameters = normalize_native(
            "fb1234://authorize#access_token=a%2Fb&state=s", Provider.FACEBOOK
        )

        assert parameters["access_token"] == "a/b"

    def test_plus_is_kept_literally(self):
        parameters = normalize_native(
            "fb1234://authorize#access_token=a+b", Provider.FACEBOOK
        )

        assert parameters["access_token"] == "a+b"

    def test_blank_and_repeated_values(self):
        parameters = normalize_native(
            "ok512://authorize#access_token=A&access_token=B&session_secret_key=",
            Provider.ODNOKLASSNIKI,
        )

        assert parameters == {"access_token": "B", "session_secret_key": ""}

    def test_google_has_no_native_shape(self):
        with pytest.raises(ValueError):
            normalize_native("x://authorize#a=b", Provider.GOOGLE)


class TestNormalizeWeb:
    """Tests for web redirect normalization."""

    def test_code_redirect(self):
        provider, parameters = normalize_web(
            f"socialnetwork://auth/simplified?state={VK_STATE}&code=ABC"
        )

        assert provider is Provider.VKONTAKTE
        assert parameters == {"code": "ABC"}

    def test_state_is_stripped(self):
        _, parameters = normalize_web(
            "socialnetwork://auth/simplified"
            "?access_token=T&state=%7B%22provider%22%3A%22google%22%7D"
        )

        assert "state" not in parameters
        assert parameters == {"access_token": "T"}

    def test_missing_state(self):
        with pytest.raises(MissingStateError):
            normalize_web("socialnetwork://auth/simplified?code=ABC")

    @pytest.mark.parametrize(
        "state",
        [
            "not-json",
            "%5B%22vkontakte%22%5D",  # ["vkontakte"]
            "%7B%22provider%22%3A1%7D",  # {"provider":1}
            "%7B%7D",  # {}
            "%7B%22provider%22%3A%22vkontakte%22%2C%22extra%22%3A1%7D",  # extra key
            "",
        ],
    )
    def test_invalid_state(self, state):
        with pytest.raises(InvalidStateError):
            normalize_web(f"socialnetwork://auth/simplified?state={state}&code=ABC")

    def test_unknown_provider(self):
        with pytest.raises(UnknownProviderError):
            normalize_web(
                "socialnetwork://auth/simplified"
                "?state=%7B%22provider%22%3A%22twitter%22%7D&code=ABC"
            )


class TestNormalize:
    def test_dispatches_on_classification(self):
        provider, parameters = normalize(
            "fb1234://authorize#access_token=XYZ",
            Classification.native(Provider.FACEBOOK),
        )

        assert provider is Provider.FACEBOOK
        assert parameters == {"access_token": "XYZ"}

    def test_rejects_unrecognized(self):
        with pytest.raises(ValueError):
            normalize("https://example.com", Classification.unrecognized())
