"""
FastAPI dependencies shared by the API routes.

``RequestContext`` carries per-request information available to every
procedure call.  For now this is only the caller identity taken from
the ``Authorization`` header, which is used when logging failures.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from user_rpc_api.app.core.config import Settings
from user_rpc_api.app.services.user_service import UserService


@dataclass(frozen=True)
class RequestContext:
    user_id: Optional[str] = None


def create_context(request: Request) -> RequestContext:
    return RequestContext(user_id=request.headers.get("authorization") or None)


def get_user_service(request: Request) -> UserService:
    """Return the service instance owned by the running application."""
    return request.app.state.user_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
