"""API routes: /user, /project and /health."""

from fastapi import APIRouter

from app.api.v1 import auth, health, projects

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/user", tags=["user"])
router.include_router(projects.router, prefix="/project", tags=["project"])
