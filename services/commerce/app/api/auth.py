from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.api.deps import current_identity
from app.api.responses import send_response
from app.application.identity_service import Identity, IdentityService
from app.application.schemas import LoginRequest, RegisterRequest
from app.infrastructure.db import get_db

router = APIRouter(tags=["auth"])

@router.post("/register", status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create a tenant together with its first user and return a bearer token."""
    return send_response(IdentityService(db).register(payload), "User register successfully.", 201)

@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return send_response(IdentityService(db).login(payload), "User login successfully.")

@router.post("/logout")
def logout(identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    IdentityService(db).logout(identity)
    return send_response([], "Logged out successfully.")
