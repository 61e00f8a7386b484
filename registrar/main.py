import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from registrar.core.config import get_settings
from registrar.db.supabase import get_supabase
from registrar.modules.assignments.router import router as assignments_router
from registrar.modules.courses.router import router as courses_router
from registrar.modules.grades.router import router as grades_router
from registrar.modules.students.router import router as students_router
from registrar.modules.submissions.router import router as submissions_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Registrar starting")
    yield


app = FastAPI(
    title="Registrar",
    description="Courses, assignments, submissions, grades and enrollment",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for development
    allow_credentials=True,
    allow_methods=["*"],  # Allow all HTTP methods
    allow_headers=["*"],  # Allow all headers
)


@app.get("/")
def root():
    return {"message": "Registrar is running"}


# Health check route
@app.get("/health")
def health_check():
    """Check if the service and database connection are healthy"""
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        get_supabase().table("courses").select("course_id").limit(1).execute()
        return {"status": "healthy", "database": "connected", "timestamp": timestamp}
    except Exception as e:
        logger.warning("Health check failed: %s", e)
        return {"status": "unhealthy", "database": f"error: {str(e)}", "timestamp": timestamp}


# Include routers
app.include_router(students_router, prefix="/students", tags=["Students"])
app.include_router(courses_router, prefix="/courses", tags=["Courses"])
app.include_router(assignments_router, prefix="/assignments", tags=["Assignments"])
app.include_router(submissions_router, prefix="/submissions", tags=["Submissions"])
app.include_router(grades_router, prefix="/grades", tags=["Grades"])
