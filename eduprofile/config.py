import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

DEFAULT_IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"


def _str_to_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.lower() in ("1", "true", "yes", "y", "on")


@dataclass
class Settings:
    firebase_api_key: str | None
    firebase_api_key_secret_name: str | None
    firebase_admin_json: str | None
    firebase_admin_secret_name: str | None
    google_project_id: str | None
    identity_toolkit_url: str
    http_timeout: float
    users_collection: str
    use_memory_store: bool
    service_version: str


def get_settings() -> Settings:
    raw_timeout = os.getenv("FIREBASE_HTTP_TIMEOUT")

    return Settings(
        firebase_api_key=os.getenv("FIREBASE_API_KEY"),
        firebase_api_key_secret_name=os.getenv("FIREBASE_API_KEY_SECRET_NAME"),
        firebase_admin_json=os.getenv("FIREBASE_ADMIN_JSON"),
        firebase_admin_secret_name=os.getenv("FIREBASE_ADMIN_SECRET_NAME"),
        google_project_id=os.getenv("GOOGLE_PROJECT_ID"),
        identity_toolkit_url=os.getenv("IDENTITY_TOOLKIT_URL", DEFAULT_IDENTITY_TOOLKIT_URL).rstrip("/"),
        http_timeout=float(raw_timeout or "30"),
        users_collection=os.getenv("USERS_COLLECTION", "users"),
        use_memory_store=_str_to_bool(os.getenv("USE_MEMORY_STORE")),
        service_version=os.getenv("SERVICE_VERSION", "0.1.0"),
    )
