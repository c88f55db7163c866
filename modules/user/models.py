"""
User Module - Profile Model
=============================
The authenticated shopper as returned by the auth/user service.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class User:
    id: str
    email: str = ""
    full_name: str = ""
    enabled: bool = True
    roles: List[str] = field(default_factory=list, compare=False, hash=False)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Optional["User"]:
        if not data or data.get("id") in (None, ""):
            return None
        return cls(
            id=str(data["id"]),
            email=data.get("email") or "",
            full_name=data.get("fullName") or "",
            enabled=data.get("enabled", True) is not False,
            roles=list(data.get("roleNames") or []),
        )

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "Customer"
