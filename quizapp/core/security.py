from fastapi import Request, HTTPException

from quizapp.core.settings import settings


async def verify_api_key(request: Request):
    """
    Admin gate: the x-api-key header must match settings.API_KEY.
    """
    api_key = request.headers.get("x-api-key")
    if not api_key or api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
