from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlmodel import Session

from quizapp.core.db import get_session

router = APIRouter(prefix="", tags=["health"])


@router.get("/healthz")
def health(session: Session = Depends(get_session)):
    session.execute(text("SELECT 1")).first()
    return {"ok": True, "database": "ok"}
