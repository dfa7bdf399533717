"""Entity store: one repository per entity kind over a SQLAlchemy session.

Every repository offers the same contract (get, scan, create, update,
delete). Mutations commit immediately; there are no transactions spanning
several kinds, so callers check cross-entity invariants before mutating.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from api.core.errors import Conflict
from api.models import (
    Activity,
    Announcement,
    Assignment,
    Course,
    Enrollment,
    Submission,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):
    model: Type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    @property
    def columns(self) -> List[str]:
        return list(self.model.__table__.columns.keys())

    def get(self, entity_id: int) -> Optional[ModelT]:
        return self.db.get(self.model, entity_id)

    def scan(self, *criteria: Any, **filters: Any) -> List[ModelT]:
        """All rows matching SQLAlchemy criteria and equality filters, by id."""
        query = self.db.query(self.model)
        if criteria:
            query = query.filter(*criteria)
        if filters:
            query = query.filter_by(**filters)
        return query.order_by(self.model.id).all()

    def create(self, **fields: Any) -> ModelT:
        self._check_columns(fields)
        instance = self.model(**fields)
        self.db.add(instance)
        self._commit()
        self.db.refresh(instance)
        return instance

    def update(self, entity_id: int, fields: Mapping[str, Any]) -> Optional[ModelT]:
        """Merge fields into an existing row. An empty patch changes nothing."""
        instance = self.get(entity_id)
        if instance is None:
            return None
        if not fields:
            return instance
        self._check_columns(fields)
        for field, value in fields.items():
            setattr(instance, field, value)
        self._commit()
        self.db.refresh(instance)
        return instance

    def delete(self, entity_id: int) -> bool:
        instance = self.get(entity_id)
        if instance is None:
            return False
        self.db.delete(instance)
        self._commit()
        return True

    def _check_columns(self, fields: Mapping[str, Any]) -> None:
        unknown = set(fields) - set(self.columns)
        if unknown:
            raise ValueError(f"Unknown {self.model.__name__} fields: {sorted(unknown)}")

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"{self.model.__name__} write rejected by a storage constraint: {e.orig}")
            raise Conflict(f"{self.model.__name__} conflicts with an existing record") from e
        except SQLAlchemyError:
            self.db.rollback()
            raise


class UserRepository(Repository[User]):
    model = User

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def by_role(self, role: UserRole) -> List[User]:
        return self.scan(role=role)


class CourseRepository(Repository[Course]):
    model = Course

    def by_faculty(self, faculty_id: int) -> List[Course]:
        return self.scan(faculty_id=faculty_id)

    def by_student(self, student_id: int) -> List[Tuple[Course, int]]:
        """Courses a student is enrolled in, paired with their progress."""
        rows = (
            self.db.query(Course, Enrollment.progress)
            .join(Enrollment, Enrollment.course_id == Course.id)
            .filter(Enrollment.student_id == student_id)
            .order_by(Course.id)
            .all()
        )
        return [(course, progress) for course, progress in rows]


class EnrollmentRepository(Repository[Enrollment]):
    model = Enrollment

    def find(self, student_id: int, course_id: int) -> Optional[Enrollment]:
        return (
            self.db.query(Enrollment)
            .filter(Enrollment.student_id == student_id, Enrollment.course_id == course_id)
            .first()
        )

    def by_course(self, course_id: int) -> List[Enrollment]:
        return self.scan(course_id=course_id)

    def by_student(self, student_id: int) -> List[Enrollment]:
        return self.scan(student_id=student_id)


class AssignmentRepository(Repository[Assignment]):
    model = Assignment

    def by_course(self, course_id: int) -> List[Assignment]:
        return self.scan(course_id=course_id)


class SubmissionRepository(Repository[Submission]):
    model = Submission

    def find(self, assignment_id: int, student_id: int) -> Optional[Submission]:
        return (
            self.db.query(Submission)
            .filter(Submission.assignment_id == assignment_id, Submission.student_id == student_id)
            .first()
        )

    def by_assignment(self, assignment_id: int) -> List[Submission]:
        return self.scan(assignment_id=assignment_id)

    def by_student(self, student_id: int) -> List[Submission]:
        return self.scan(student_id=student_id)


class AnnouncementRepository(Repository[Announcement]):
    model = Announcement

    def for_course(self, course_id: int) -> List[Announcement]:
        """A course's announcements plus the platform-wide ones."""
        return self.scan((Announcement.course_id == course_id) | Announcement.is_global.is_(True))


class ActivityRepository(Repository[Activity]):
    """Append-only; records are never changed or removed."""

    model = Activity

    def record(self, user_id: int, action: str, detail: str) -> Activity:
        return self.create(user_id=user_id, action=action, detail=detail)

    def recent(self, limit: int = 10) -> List[Activity]:
        return (
            self.db.query(Activity)
            .order_by(Activity.timestamp.desc(), Activity.id.desc())
            .limit(limit)
            .all()
        )

    def by_user(self, user_id: int) -> List[Activity]:
        return self.scan(user_id=user_id)

    def update(self, entity_id: int, fields: Mapping[str, Any]) -> Optional[Activity]:
        raise TypeError("Activity records are append-only")

    def delete(self, entity_id: int) -> bool:
        raise TypeError("Activity records are append-only")


class Store:
    """Repositories for every entity kind, bound to one session."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.courses = CourseRepository(db)
        self.enrollments = EnrollmentRepository(db)
        self.assignments = AssignmentRepository(db)
        self.submissions = SubmissionRepository(db)
        self.announcements = AnnouncementRepository(db)
        self.activities = ActivityRepository(db)

    def counts(self) -> Dict[str, int]:
        return {
            "users": self.db.query(User).count(),
            "courses": self.db.query(Course).count(),
            "enrollments": self.db.query(Enrollment).count(),
            "assignments": self.db.query(Assignment).count(),
            "submissions": self.db.query(Submission).count(),
            "announcements": self.db.query(Announcement).count(),
        }
