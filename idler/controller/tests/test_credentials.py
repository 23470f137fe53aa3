"""
Tests for reading gateway credentials from mounted secrets.
"""

import logging

from idler.controller.config import IdlerConfig
from idler.controller.core.credentials import load_credentials, read_secret
from idler.controller.models import Credentials


def _config(tmp_path, user="basic-auth-user", password="basic-auth-password") -> IdlerConfig:
    return IdlerConfig(
        _env_file=None,
        BASIC_AUTH_USER_FILE=str(tmp_path / user),
        BASIC_AUTH_PASSWORD_FILE=str(tmp_path / password),
    )


def test_read_secret_strips_whitespace(tmp_path):
    path = tmp_path / "secret"
    path.write_text("  admin\n")

    assert read_secret(str(path)) == "admin"


def test_read_secret_missing_file(tmp_path):
    assert read_secret(str(tmp_path / "nope")) == ""


def test_load_credentials(tmp_path):
    (tmp_path / "basic-auth-user").write_text("admin\n")
    (tmp_path / "basic-auth-password").write_text("s3cr3t\n")

    assert load_credentials(_config(tmp_path)) == Credentials("admin", "s3cr3t")


def test_missing_secrets_are_logged_not_fatal(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="idler.credentials"):
        credentials = load_credentials(_config(tmp_path))

    assert credentials == Credentials("", "")
    assert "Unable to read username" in caplog.text
    assert "Unable to read password" in caplog.text


def test_unreadable_secret_is_logged(tmp_path, caplog):
    (tmp_path / "basic-auth-user").mkdir()
    (tmp_path / "basic-auth-password").write_text("s3cr3t")

    with caplog.at_level(logging.WARNING, logger="idler.credentials"):
        credentials = load_credentials(_config(tmp_path))

    assert credentials == Credentials("", "s3cr3t")
    assert "Unable to read username" in caplog.text
