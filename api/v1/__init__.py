# api/v1/__init__.py
from fastapi import APIRouter
from .ghl import router as ghl_router
from .invites import router as invites_router
from .profiles import router as profiles_router

router = APIRouter(prefix="/v1")
router.include_router(ghl_router)
router.include_router(invites_router)
router.include_router(profiles_router)
