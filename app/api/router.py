from fastapi import APIRouter

from app.api.routes.interviews import router as interviews_router
from app.api.routes.questions import router as questions_router
from app.api.routes.users import router as users_router

api_router = APIRouter()
api_router.include_router(interviews_router)
api_router.include_router(questions_router)
api_router.include_router(users_router)
