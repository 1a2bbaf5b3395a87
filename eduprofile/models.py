from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from .validation import parse_graduation_year

UNSPECIFIED = "No especificado"
DEFAULT_DISPLAY_NAME = "Usuario"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def greeting(now: Optional[datetime] = None) -> str:
    hour = (now or datetime.now()).hour
    if hour < 12:
        return "Buenos días"
    if hour < 18:
        return "Buenas tardes"
    return "Buenas noches"


@dataclass(frozen=True)
class Identity:
    """Authenticated user handle issued by the authentication service.

    ``id_token``/``refresh_token`` are session material only; they are never
    written to the document store and are excluded from ``repr``.
    """

    id: str
    email: str
    display_name: Optional[str] = None
    id_token: str = field(default="", repr=False)
    refresh_token: str = field(default="", repr=False)

    def with_tokens(self, id_token: str, refresh_token: str) -> "Identity":
        return replace(self, id_token=id_token, refresh_token=refresh_token)

    def public(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "displayName": self.display_name}


@dataclass
class Profile:
    """Academic profile stored at ``users/{identity.id}``."""

    name: str
    email: str
    degree: str
    graduation_year: Union[int, str]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    is_fallback: bool = False

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "Profile":
        return cls(
            name=data.get("name", ""),
            email=data.get("email", ""),
            degree=data.get("degree", ""),
            graduation_year=data.get("graduationYear", UNSPECIFIED),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    @classmethod
    def fallback(cls, identity: Identity) -> "Profile":
        return cls(
            name=identity.display_name or DEFAULT_DISPLAY_NAME,
            email=identity.email,
            degree=UNSPECIFIED,
            graduation_year=UNSPECIFIED,
            is_fallback=True,
        )

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "name": self.name,
            "email": self.email,
            "degree": self.degree,
            "graduationYear": self.graduation_year,
        }
        if self.created_at:
            doc["createdAt"] = self.created_at
        if self.updated_at:
            doc["updatedAt"] = self.updated_at
        return doc

    @property
    def graduation_year_value(self) -> Optional[int]:
        # Other clients may store the year as a numeric string
        return parse_graduation_year(self.graduation_year)

    @property
    def has_graduation_year(self) -> bool:
        return self.graduation_year_value is not None

    def years_since_graduation(self, now: Optional[datetime] = None) -> Union[int, str]:
        # Negative for graduation years still ahead
        year = self.graduation_year_value
        if year is None:
            return UNSPECIFIED
        now = now or datetime.now()
        return now.year - year

    @property
    def initials(self) -> str:
        """First letter of each word, upper-cased, at most two; ``"?"`` without a name."""
        if not self.name:
            return "?"
        return "".join(word[:1] for word in self.name.split(" ")).upper()[:2]

    def to_view(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Home-screen representation."""
        now = now or datetime.now()
        view = self.to_document()
        view["yearsSinceGraduation"] = self.years_since_graduation(now)
        view["initials"] = self.initials
        view["greeting"] = greeting(now)
        view["isFallback"] = self.is_fallback
        return view
