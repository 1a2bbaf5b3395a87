"""
Tests for Firebase bootstrap: service account, web API key and secret paths.

Run with:
    pytest tests/test_firebase_client.py -v
"""

import json

import pytest
from unittest.mock import MagicMock, patch

from eduprofile import firebase_client
from eduprofile.tools import g_cred

SA_INFO = {"type": "service_account", "project_id": "edu-project"}


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    for name in ("_FIREBASE_APP", "_FIRESTORE_CLIENT", "_SA_INFO", "_API_KEY"):
        monkeypatch.setattr(firebase_client, name, None)
    for var in ("FIREBASE_API_KEY", "FIREBASE_API_KEY_SECRET_NAME", "FIREBASE_ADMIN_JSON",
                "FIREBASE_ADMIN_SECRET_NAME", "GOOGLE_PROJECT_ID"):
        monkeypatch.delenv(var, raising=False)


def test_service_account_from_env(monkeypatch):
    monkeypatch.setenv("FIREBASE_ADMIN_JSON", json.dumps(SA_INFO))
    assert firebase_client._load_service_account_info() == SA_INFO


def test_service_account_from_secret(monkeypatch):
    monkeypatch.setenv("FIREBASE_ADMIN_SECRET_NAME", "eduprofile-admin")
    with patch("eduprofile.firebase_client.get_secret", return_value=json.dumps(SA_INFO)) as get_secret:
        assert firebase_client._load_service_account_info() == SA_INFO
    get_secret.assert_called_once_with("eduprofile-admin")


def test_service_account_missing():
    with pytest.raises(RuntimeError):
        firebase_client._load_service_account_info()


def test_firestore_client_is_cached(monkeypatch):
    monkeypatch.setenv("FIREBASE_ADMIN_JSON", json.dumps(SA_INFO))
    with patch("eduprofile.firebase_client.credentials.Certificate") as cert, \
         patch("eduprofile.firebase_client.initialize_app") as init_app, \
         patch("eduprofile.firebase_client.service_account.Credentials.from_service_account_info") as creds, \
         patch("eduprofile.firebase_client.firestore.Client") as client_cls:
        first = firebase_client.get_firestore()
        second = firebase_client.get_firestore()

    assert first is second
    init_app.assert_called_once_with(cert.return_value)
    client_cls.assert_called_once_with(project="edu-project", credentials=creds.return_value)


def test_web_api_key_from_env(monkeypatch):
    monkeypatch.setenv("FIREBASE_API_KEY", "key-123")
    assert firebase_client.get_web_api_key() == "key-123"


def test_web_api_key_from_secret(monkeypatch):
    monkeypatch.setenv("FIREBASE_API_KEY_SECRET_NAME", "web-key")
    with patch("eduprofile.firebase_client.get_secret", return_value="key-456\n"):
        assert firebase_client.get_web_api_key() == "key-456"


def test_web_api_key_missing():
    with pytest.raises(RuntimeError):
        firebase_client.get_web_api_key()


class TestSecretPaths:
    def test_full_resource_name(self):
        path = "projects/p/secrets/s"
        assert g_cred._resolve_version_path(path) == "projects/p/secrets/s/versions/latest"
        assert g_cred._resolve_version_path(path + "/versions/3") == path + "/versions/3"

    def test_short_name_needs_project(self, monkeypatch):
        with pytest.raises(RuntimeError):
            g_cred._resolve_version_path("s")
        monkeypatch.setenv("GOOGLE_PROJECT_ID", "p")
        assert g_cred._resolve_version_path("s") == "projects/p/secrets/s/versions/latest"

    def test_get_secret(self, monkeypatch):
        monkeypatch.setattr(g_cred, "_client_cache", None)
        monkeypatch.delenv("GOOGLE_SERVICE_ACCOUNT_JSON", raising=False)
        monkeypatch.delenv("GOOGLE_SERVICE_ACCOUNT_JSON_B64", raising=False)
        monkeypatch.setenv("GOOGLE_PROJECT_ID", "p")
        client = MagicMock()
        client.access_secret_version.return_value.payload.data = b"value"
        with patch("eduprofile.tools.g_cred.secretmanager.SecretManagerServiceClient", return_value=client):
            assert g_cred.get_secret("s") == "value"
        client.access_secret_version.assert_called_once_with(
            request={"name": "projects/p/secrets/s/versions/latest"}
        )
