from typing import Optional
from uuid import UUID

from fastapi.security import HTTPBearer
from starlette_context import context


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id() -> Optional[UUID]:
    return context.get("user_id") if context.exists() else None
