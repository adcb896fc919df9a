"""Course service — CRUD with owner/admin rules.

Ordering for single-course routes: the course is loaded first and the
ownership check runs against its owner. A caller without rights gets
404 for an id that does not exist and 403 for one that does, so the
existence of a course id is visible to any signed-in user; its
contents are not.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.auth.dependencies import Identity
from coursehub.auth.policy import is_admin, is_owner_or_admin
from coursehub.db.models import Course, User
from coursehub.errors import Forbidden, NotFound
from coursehub.schemas.course import CourseCreate, CourseUpdate

logger = structlog.get_logger()


class CourseService:
    """Business logic for courses."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_courses(self, identity: Identity) -> list[Course]:
        """Admins see every course; everyone else sees their own."""
        q = select(Course).order_by(Course.created_at)
        if not is_admin(identity):
            q = q.where(Course.owner_id == identity.id)
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def get_course(self, identity: Identity, course_id: uuid.UUID) -> Course:
        course = await self.db.get(Course, course_id)
        if course is None:
            raise NotFound("Course not found")
        if not is_owner_or_admin(identity, course.owner_id):
            raise Forbidden()
        return course

    async def create_course(self, identity: Identity, body: CourseCreate) -> Course:
        """The creator owns the course unless an admin names another owner."""
        owner_id = identity.id
        if is_admin(identity) and body.owner_id is not None:
            if await self.db.get(User, body.owner_id) is None:
                raise NotFound("Owner not found")
            owner_id = body.owner_id

        course = Course(name=body.name, topic=body.topic, owner_id=owner_id)
        self.db.add(course)
        await self.db.commit()
        await self.db.refresh(course, attribute_names=["owner"])
        logger.info(
            "courses.created",
            course_id=str(course.id),
            owner_id=str(owner_id),
            created_by=str(identity.id),
        )
        return course

    async def update_course(
        self, identity: Identity, course_id: uuid.UUID, body: CourseUpdate
    ) -> Course:
        course = await self.get_course(identity, course_id)
        if body.name:
            course.name = body.name
        if body.topic is not None:
            course.topic = body.topic
        await self.db.commit()
        return course

    async def delete_course(self, identity: Identity, course_id: uuid.UUID) -> None:
        course = await self.get_course(identity, course_id)
        await self.db.delete(course)
        await self.db.commit()
        logger.info("courses.deleted", course_id=str(course_id), deleted_by=str(identity.id))
