from fastapi import APIRouter, Depends, status

from retail_api.api.deps import RequestContext, get_request_context
from retail_api.db.mongo import get_db
from retail_api.models.schemas import UserCreate, UserLogin, UserOut, AuthOut
from retail_api.services import auth_service

router = APIRouter()

@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db=Depends(get_db)):
    return auth_service.register_user(db, payload.name, payload.email, payload.password)

@router.post("/login", response_model=AuthOut)
def login(payload: UserLogin, db=Depends(get_db)):
    return auth_service.authenticate(db, payload.email, payload.password)

@router.get("/profile", response_model=UserOut)
def profile(ctx: RequestContext = Depends(get_request_context), db=Depends(get_db)):
    user_id = ctx.user["_id"] if ctx.user else None
    return auth_service.get_profile(db, user_id)
