import base64
import json
import os
from typing import Optional

from google.cloud import secretmanager
from google.oauth2 import service_account

_client_cache: Optional[secretmanager.SecretManagerServiceClient] = None


def _resolve_version_path(secret_name: str) -> str:
    if secret_name.startswith("projects/"):
        return secret_name if "/versions/" in secret_name else f"{secret_name}/versions/latest"
    project_id = os.getenv("GOOGLE_PROJECT_ID")
    if not project_id:
        raise RuntimeError("GOOGLE_PROJECT_ID is required to read secrets")
    return f"projects/{project_id}/secrets/{secret_name}/versions/latest"


def _build_client() -> secretmanager.SecretManagerServiceClient:
    global _client_cache
    if _client_cache is not None:
        return _client_cache

    # Inline service account (base64 variant survives CI/CD env injection)
    sa_json_b64 = os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON_B64")
    sa_json = os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON")
    if sa_json_b64:
        sa_json = base64.b64decode(sa_json_b64).decode("utf-8")
    if sa_json:
        creds = service_account.Credentials.from_service_account_info(json.loads(sa_json))
        _client_cache = secretmanager.SecretManagerServiceClient(credentials=creds)
        return _client_cache

    # Application default credentials (GOOGLE_APPLICATION_CREDENTIALS, GCE/GKE, gcloud)
    _client_cache = secretmanager.SecretManagerServiceClient()
    return _client_cache


def get_secret(secret_name: str) -> str:
    client = _build_client()
    resp = client.access_secret_version(request={"name": _resolve_version_path(secret_name)})
    return resp.payload.data.decode("utf-8")
