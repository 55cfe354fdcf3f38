from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.database import engine, get_db
from app.models.company import Company
from app.models.employee import Employee
from app.models.user import User
from app.routers import auth, company, employee, user
from app.core.config import settings
from app.core.exceptions import setup_exception_handlers
from app.core.logging_config import logger

# Schema is managed with Alembic; Base.metadata.create_all is not called here


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Failing to reach the database is the only condition that stops the process
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed at startup: {str(e)}")
        raise
    logger.info("Database connected successfully")
    yield


app = FastAPI(
    title="Be-Smart Directory API",
    version="1.0.0",
    redirect_slashes=False,  # Disable automatic redirects to prevent POST data loss
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(company.router, prefix="/api/companies", tags=["Companies"])
app.include_router(employee.router, prefix="/api/employees", tags=["Employees"])
app.include_router(user.router, prefix="/api/users", tags=["Users"])


@app.get("/api")
def api_root():
    return {
        "success": True,
        "message": "Be-Smart API is running",
        "version": app.version,
        "endpoints": {
            "auth": "/api/auth",
            "companies": "/api/companies",
            "employees": "/api/employees",
            "users": "/api/users",
            "health": "/api/health",
        },
    }


@app.get("/api/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {
            "success": True,
            "status": "healthy",
            "database": "connected"
        }
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy"
        )
