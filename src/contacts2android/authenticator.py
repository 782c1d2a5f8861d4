"""Stub account authenticator for the sync adapter account type.

It performs no authentication. Adding an account redirects to the host
application; every other callback is unsupported.
"""

from typing import Any

from contacts2android.config import Settings
from contacts2android.exceptions import ConfigurationError, UnsupportedOperationError
from contacts2android.models import Account, Intent

KEY_INTENT = "intent"
FLAG_ACTIVITY_NEW_TASK = 0x10000000


class StubAuthenticator:
    """Account authenticator whose only real behaviour is launching the host app."""

    def __init__(self, host_package: str | None, entry_activity: str = ".MainActivity"):
        self.host_package = host_package
        self.entry_activity = entry_activity

    @classmethod
    def from_settings(cls, settings: Settings) -> "StubAuthenticator":
        return cls(settings.host_package, settings.entry_activity)

    def _launch_intent(self) -> Intent:
        if not self.host_package:
            raise ConfigurationError("HOST_PACKAGE must be set to redirect account creation")
        activity = self.entry_activity
        if activity.startswith("."):
            activity = self.host_package + activity
        return Intent(
            package=self.host_package,
            component=f"{self.host_package}/{activity}",
            flags=FLAG_ACTIVITY_NEW_TASK,
        )

    def add_account(
        self,
        response: Any,
        account_type: str,
        auth_token_type: str | None,
        required_features: list[str] | None,
        options: dict[str, Any] | None,
    ) -> dict[str, Any]:
        """Return ``options`` with an intent that opens the host application."""
        bundle = options if options is not None else {}
        bundle[KEY_INTENT] = self._launch_intent()
        return bundle

    def confirm_credentials(self, response: Any, account: Account, options: dict[str, Any] | None) -> None:
        return None

    def edit_properties(self, response: Any, account_type: str) -> dict[str, Any]:
        raise UnsupportedOperationError("edit_properties")

    def get_auth_token(
        self, response: Any, account: Account, auth_token_type: str, options: dict[str, Any] | None
    ) -> dict[str, Any]:
        raise UnsupportedOperationError("get_auth_token")

    def get_auth_token_label(self, auth_token_type: str) -> str:
        raise UnsupportedOperationError("get_auth_token_label")

    def update_credentials(
        self, response: Any, account: Account, auth_token_type: str, options: dict[str, Any] | None
    ) -> dict[str, Any]:
        raise UnsupportedOperationError("update_credentials")

    def has_features(self, response: Any, account: Account, features: list[str]) -> dict[str, Any]:
        raise UnsupportedOperationError("has_features")
