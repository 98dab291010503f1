"""Users and complaints held by the in-memory stores."""
import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .eventlog import to_iso, utc_now

STATUS_PENDING = "pending"
STATUS_RESOLVED = "resolved"


@dataclass
class User:
    id: str
    secret_code: str
    name: str
    email: str
    complaints: List[str] = field(default_factory=list)
    is_admin: bool = False

    def snapshot(self) -> "User":
        return copy.deepcopy(self)

    def to_registration_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "secret_code": self.secret_code,
            "name": self.name,
            "email": self.email,
        }

    def to_dict(self) -> Dict[str, Any]:
        d = self.to_registration_dict()
        d["complaints"] = list(self.complaints)
        d["is_admin"] = self.is_admin
        return d


@dataclass
class Complaint:
    id: str
    title: str
    summary: str
    rating: int
    user_id: str
    user_name: str
    status: str = STATUS_PENDING
    created_at: datetime = field(default_factory=utc_now)
    resolved_at: Optional[datetime] = None

    @property
    def is_resolved(self) -> bool:
        return self.status == STATUS_RESOLVED

    def snapshot(self) -> "Complaint":
        return copy.copy(self)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "rating": self.rating,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "status": self.status,
            "created_at": to_iso(self.created_at),
        }
        # resolved_at only appears once the complaint is resolved
        if self.resolved_at is not None:
            d["resolved_at"] = to_iso(self.resolved_at)
        return d
