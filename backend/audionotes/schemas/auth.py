from typing import Optional
from uuid import UUID
from pydantic import BaseModel


class AuthenticatedUser(BaseModel):
    id: UUID
    email: Optional[str] = None
