import json
from typing import Optional

import firebase_admin
from firebase_admin import credentials, initialize_app
from google.cloud import firestore
from google.oauth2 import service_account

from .config import get_settings
from .tools.g_cred import get_secret

_FIREBASE_APP: Optional[firebase_admin.App] = None
_FIRESTORE_CLIENT: Optional[firestore.Client] = None
_SA_INFO: Optional[dict] = None
_API_KEY: Optional[str] = None


def _load_service_account_info() -> dict:
    global _SA_INFO
    if _SA_INFO is not None:
        return _SA_INFO

    settings = get_settings()

    # 1) JSON direct via env (dev/local)
    if settings.firebase_admin_json:
        _SA_INFO = json.loads(settings.firebase_admin_json)
        return _SA_INFO

    # 2) Secret Manager (secret id or full projects/*/secrets/*/versions/* path)
    if not settings.firebase_admin_secret_name:
        raise RuntimeError("FIREBASE_ADMIN_JSON or FIREBASE_ADMIN_SECRET_NAME must be set")
    _SA_INFO = json.loads(get_secret(settings.firebase_admin_secret_name))
    return _SA_INFO


def get_firebase_app() -> firebase_admin.App:
    global _FIREBASE_APP
    if _FIREBASE_APP is not None:
        return _FIREBASE_APP
    sa_info = _load_service_account_info()
    cred = credentials.Certificate(sa_info)
    _FIREBASE_APP = initialize_app(cred)
    return _FIREBASE_APP


def get_firestore() -> firestore.Client:
    global _FIRESTORE_CLIENT
    if _FIRESTORE_CLIENT is not None:
        return _FIRESTORE_CLIENT

    get_firebase_app()
    sa_info = _load_service_account_info()
    creds = service_account.Credentials.from_service_account_info(sa_info)
    project = get_settings().google_project_id or sa_info.get("project_id")
    _FIRESTORE_CLIENT = firestore.Client(project=project, credentials=creds)
    return _FIRESTORE_CLIENT


def get_web_api_key() -> str:
    """Web API key used by the Identity Toolkit REST endpoints."""
    global _API_KEY
    if _API_KEY is not None:
        return _API_KEY

    settings = get_settings()
    if settings.firebase_api_key:
        _API_KEY = settings.firebase_api_key
    elif settings.firebase_api_key_secret_name:
        _API_KEY = get_secret(settings.firebase_api_key_secret_name).strip()
    else:
        raise RuntimeError("FIREBASE_API_KEY or FIREBASE_API_KEY_SECRET_NAME must be set")
    return _API_KEY
