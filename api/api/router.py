from fastapi import APIRouter
from api.api.routes import analytics, announcements, assignments, auth, courses, enrollments, submissions, users

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(courses.router, prefix="/courses", tags=["courses"])
api_router.include_router(enrollments.router, prefix="/enrollments", tags=["enrollments"])
api_router.include_router(assignments.router, prefix="/assignments", tags=["assignments"])
api_router.include_router(submissions.router, prefix="/submissions", tags=["submissions"])
api_router.include_router(announcements.router, prefix="/announcements", tags=["announcements"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
