from typing import List

from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """The authenticated caller as reported by the user management service."""
    id: int
    username: str
    roles: List[str] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return any(role.lower() in ("admin", "role_admin") for role in self.roles)
