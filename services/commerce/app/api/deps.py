from fastapi import Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from shared.core import set_request_context
from app.application.identity_service import Identity, IdentityService
from app.domain.errors import Unauthorized
from app.infrastructure.db import get_db

BEARER_PREFIX = "Bearer "

async def current_identity(request: Request, db: Session = Depends(get_db)) -> Identity:
    """Resolve the bearer token into the caller's user and tenant.

    Runs on the event loop so the tenant and user bound to the logging
    context are inherited by the sync endpoint that follows.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise Unauthorized("Missing token")
    token = auth_header[len(BEARER_PREFIX):].strip()
    identity = await run_in_threadpool(IdentityService(db).resolve, token)
    set_request_context(tenant_id=identity.tenant_id, user_id=identity.user_id)
    return identity
