"""
Tests for the stub account authenticator.
"""

import pytest

from contacts2android.authenticator import FLAG_ACTIVITY_NEW_TASK, KEY_INTENT, StubAuthenticator
from contacts2android.exceptions import ConfigurationError, UnsupportedOperationError
from contacts2android.models import Account

ACCOUNT = Account(name="ann@example.com", type="io.example.sync")


@pytest.fixture
def authenticator():
    return StubAuthenticator("io.example.app", ".MainActivity")


class TestAddAccount:
    def test_returns_bundle_with_launch_intent(self, authenticator):
        options = {"existing": 1}
        bundle = authenticator.add_account(None, ACCOUNT.type, None, None, options)

        assert bundle is options
        assert bundle["existing"] == 1
        intent = bundle[KEY_INTENT]
        assert intent.package == "io.example.app"
        assert intent.component == "io.example.app/io.example.app.MainActivity"
        assert intent.flags & FLAG_ACTIVITY_NEW_TASK
        assert intent.action == "android.intent.action.MAIN"

    def test_fully_qualified_activity(self):
        authenticator = StubAuthenticator("io.example.app", "io.example.ui.Home")
        bundle = authenticator.add_account(None, ACCOUNT.type, None, None, None)
        assert bundle[KEY_INTENT].component == "io.example.app/io.example.ui.Home"

    def test_requires_host_package(self):
        with pytest.raises(ConfigurationError):
            StubAuthenticator(None).add_account(None, ACCOUNT.type, None, None, {})

    def test_from_settings(self, settings):
        settings.host_package = "io.example.app"
        authenticator = StubAuthenticator.from_settings(settings)
        assert authenticator.host_package == "io.example.app"
        assert authenticator.entry_activity == ".MainActivity"


class TestOtherCallbacks:
    def test_confirm_credentials_returns_nothing(self, authenticator):
        assert authenticator.confirm_credentials(None, ACCOUNT, {}) is None

    @pytest.mark.parametrize(
        "call",
        [
            lambda a: a.edit_properties(None, ACCOUNT.type),
            lambda a: a.get_auth_token(None, ACCOUNT, "full", {}),
            lambda a: a.get_auth_token_label("full"),
            lambda a: a.update_credentials(None, ACCOUNT, "full", {}),
            lambda a: a.has_features(None, ACCOUNT, ["feature"]),
        ],
    )
    def test_unsupported(self, authenticator, call):
        with pytest.raises(UnsupportedOperationError):
            call(authenticator)

    def test_unsupported_is_not_implemented(self, authenticator):
        with pytest.raises(NotImplementedError, match="get_auth_token_label"):
            authenticator.get_auth_token_label("full")
