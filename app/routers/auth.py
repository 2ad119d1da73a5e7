# app/routers/auth.py
"""Registration + login. The only business endpoints reachable without a token."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.auth import AuthOut, LoginIn, RegisterIn
from app.services import auth_service

router = APIRouter()


@router.post("/auth/register", response_model=AuthOut, status_code=201, summary="Create a user account")
async def register(body: RegisterIn, response: Response, db: Session = Depends(get_db)):
    token, user = await auth_service.register(db, body)
    response.headers["Authorization"] = f"Bearer {token}"
    return {"access_token": token, "user": user}


@router.post("/auth/login", response_model=AuthOut, summary="Exchange credentials for a bearer token")
def login(body: LoginIn, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, body)
    return {"access_token": token, "user": user}
