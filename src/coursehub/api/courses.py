"""Course API routes.

Admins see and manage every course; everyone else only their own.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.auth.dependencies import Identity, get_current_identity
from coursehub.db.engine import get_db
from coursehub.schemas.course import CourseCreate, CourseRead, CourseUpdate
from coursehub.services.course_service import CourseService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> CourseService:
    return CourseService(db)


@router.get("/courses", response_model=list[CourseRead])
async def list_courses(
    identity: Identity = Depends(get_current_identity),
    svc: CourseService = Depends(_svc),
):
    return await svc.list_courses(identity)


@router.get("/courses/{course_id}", response_model=CourseRead)
async def get_course(
    course_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    svc: CourseService = Depends(_svc),
):
    return await svc.get_course(identity, course_id)


@router.post("/courses", response_model=CourseRead, status_code=201)
async def create_course(
    body: CourseCreate,
    identity: Identity = Depends(get_current_identity),
    svc: CourseService = Depends(_svc),
):
    """Create a course. Admins may pass ownerId to create it for someone else."""
    return await svc.create_course(identity, body)


@router.put("/courses/{course_id}", response_model=CourseRead)
async def update_course(
    course_id: uuid.UUID,
    body: CourseUpdate,
    identity: Identity = Depends(get_current_identity),
    svc: CourseService = Depends(_svc),
):
    return await svc.update_course(identity, course_id, body)


@router.delete("/courses/{course_id}")
async def delete_course(
    course_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    svc: CourseService = Depends(_svc),
):
    await svc.delete_course(identity, course_id)
    return {"ok": True}
