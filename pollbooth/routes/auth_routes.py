from fastapi import APIRouter, Depends, Form, HTTPException

from pollbooth.crud import login_director
from pollbooth.database.connection import Backend
from pollbooth.dependencies import get_backend
from pollbooth.schemas import TokenOut
from pollbooth.security import create_access_token

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/login", response_model=TokenOut)
def admin_login(
    username: str = Form(...),
    password: str = Form(...),
    backend: Backend = Depends(get_backend),
):
    director, error = login_director(backend, username, password)
    if error:
        raise HTTPException(status_code=401, detail=error)
    token = create_access_token({"sub": director["username"]})
    return TokenOut(access_token=token)
