"""Unit tests for the credential gate."""

import logging

import pytest
from pydantic import ValidationError

from scheduler_session.credentials import Credentials, require_credentials
from scheduler_session.exceptions import ConfigurationError


class TestCredentials:
    """Tests for the Credentials value object."""

    def test_values_are_hidden_from_repr_and_str(self):
        creds = Credentials(identity="1234567", secret="hunter2")

        assert "1234567" not in repr(creds)
        assert "hunter2" not in repr(creds)
        assert "1234567" not in str(creds)
        assert "hunter2" not in str(creds)
        assert creds.secret.get_secret_value() == "hunter2"

    def test_credentials_are_immutable(self):
        creds = Credentials(identity="1234567", secret="hunter2")

        with pytest.raises(ValidationError):
            creds.identity = "other"


class TestRequireCredentials:
    """Tests for require_credentials."""

    def test_both_present(self):
        creds = require_credentials("1234567", "hunter2")

        assert creds.identity == "1234567"
        assert creds.secret.get_secret_value() == "hunter2"

    @pytest.mark.parametrize("identity,secret,missing", [
        ("", "hunter2", ["identity"]),
        (None, "hunter2", ["identity"]),
        ("1234567", "", ["secret"]),
        (None, None, ["identity", "secret"]),
    ])
    def test_missing_values_rejected(self, identity, secret, missing):
        with pytest.raises(ConfigurationError) as exc_info:
            require_credentials(identity, secret)

        assert exc_info.value.missing == missing
        assert exc_info.value.error_code == "configuration_error"

    def test_missing_values_are_logged_by_label(self, caplog):
        labels = {"identity": "MY_UH_PEOPLESOFT_ID", "secret": "MY_UH_PASSWORD"}

        with caplog.at_level(logging.ERROR, logger="scheduler_session.credentials"):
            with pytest.raises(ConfigurationError):
                require_credentials("", "", labels=labels)

        messages = [r.getMessage() for r in caplog.records]
        assert "Must define MY_UH_PEOPLESOFT_ID in environment or .env file" in messages
        assert "Must define MY_UH_PASSWORD in environment or .env file" in messages

    def test_secret_never_logged(self, caplog):
        with caplog.at_level(logging.DEBUG):
            with pytest.raises(ConfigurationError):
                require_credentials("", "hunter2")

        assert "hunter2" not in caplog.text
