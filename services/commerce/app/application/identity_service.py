"""Tenant directory: registration, login and bearer token resolution."""

from dataclasses import dataclass
from typing import Optional
import threading
import bcrypt
from cachetools import TTLCache
from sqlalchemy.orm import Session
from shared.core import get_logger
from app.auth_local import create_access_token, decode_access_token
from app.core_settings import get_settings
from app.domain.errors import Unauthorized, ValidationError
from app.domain.models import Tenant, User
from app.infrastructure.unit_of_work import UnitOfWork
from .schemas import LoginRequest, RegisterRequest, TokenRead

logger = get_logger(__name__)

@dataclass(frozen=True)
class Identity:
    user_id: int
    tenant_id: int
    token_version: int
    name: str

# user_id -> Identity; evicted on logout so a revoked token version is noticed at once.
# TTLCache is not thread-safe and requests resolve tokens on threadpool workers.
_identity_cache: Optional[TTLCache] = None
_identity_lock = threading.Lock()

def _cache() -> TTLCache:
    # Caller holds _identity_lock
    global _identity_cache
    if _identity_cache is None:
        _identity_cache = TTLCache(maxsize=1024, ttl=get_settings().IDENTITY_CACHE_TTL)
    return _identity_cache

def cached_identity(user_id: int) -> Optional[Identity]:
    with _identity_lock:
        return _cache().get(user_id)

def remember_identity(identity: Identity) -> None:
    with _identity_lock:
        _cache()[identity.user_id] = identity

def forget_identity(user_id: int) -> None:
    with _identity_lock:
        _cache().pop(user_id, None)

def clear_identity_cache() -> None:
    with _identity_lock:
        _cache().clear()

def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False

class IdentityService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, data: RegisterRequest) -> TokenRead:
        with UnitOfWork(self.db) as uow:
            if uow.users.get_by_email(data.email) is not None:
                raise ValidationError("Validation Error", {"email": ["The email has already been taken."]})
            tenant = uow.tenants.add(Tenant(name=data.tenant_name))
            user = uow.users.add(User(
                tenant_id=tenant.id,
                name=data.name,
                email=data.email,
                password_hash=hash_password(data.password),
                token_version=0,
            ))
            token = create_access_token(user.id, tenant.id, user.token_version)
            result = TokenRead(token=token, name=user.name)
            user_id, tenant_id = user.id, tenant.id
            uow.commit()
        logger.info("Tenant registered", extra={'extra_fields': {'tenant_id': tenant_id, 'user_id': user_id}})
        return result

    def login(self, data: LoginRequest) -> TokenRead:
        with UnitOfWork(self.db) as uow:
            user = uow.users.get_by_email(data.email)
            if user is None or not verify_password(data.password, user.password_hash):
                logger.warning("Login refused", extra={'extra_fields': {'email': data.email}})
                raise Unauthorized("Unauthorised.", {"error": ["Unauthorised"]})
            return TokenRead(
                token=create_access_token(user.id, user.tenant_id, user.token_version),
                name=user.name,
            )

    def logout(self, identity: Identity) -> None:
        """Revoke every token issued to the user so far."""
        with UnitOfWork(self.db) as uow:
            user = uow.users.get(identity.user_id)
            if user is None:
                raise Unauthorized("No user authenticated.")
            user.token_version = user.token_version + 1
            uow.commit()
        forget_identity(identity.user_id)
        logger.info("User logged out", extra={'extra_fields': {'user_id': identity.user_id}})

    def resolve(self, token: str) -> Identity:
        claims = decode_access_token(token)
        if not claims:
            raise Unauthorized("Invalid token")
        try:
            user_id = int(claims["sub"])
            tenant_id = int(claims["tenant_id"])
            version = int(claims.get("ver", 0))
        except (KeyError, TypeError, ValueError):
            raise Unauthorized("Invalid token")

        identity = cached_identity(user_id)
        if identity is None:
            with UnitOfWork(self.db) as uow:
                user = uow.users.get(user_id)
                if user is None:
                    raise Unauthorized("Invalid token")
                identity = Identity(user.id, user.tenant_id, user.token_version, user.name)
            remember_identity(identity)

        if identity.tenant_id != tenant_id or identity.token_version != version:
            raise Unauthorized("Token has been revoked")
        return identity
