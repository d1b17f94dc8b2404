# schooldesk/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from schooldesk.core.config import settings
from schooldesk.core.database import init_db, close_db
from schooldesk.core.errors import BaseAPIError, get_error_message
from schooldesk.core.logging import logger
from schooldesk.middleware import RequestIDMiddleware, TenantMiddleware
from schooldesk.routes import auth, dashboard, classes, students, teachers


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("Application startup completed")
    yield
    await close_db()
    logger.info("Application shutdown completed")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-tenant school administration API",
        version=settings.VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan
    )

    # Added first so it runs innermost, after CORS and request tagging
    app.add_middleware(TenantMiddleware, reserved_segments=settings.RESERVED_SEGMENTS)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(BaseAPIError)
    async def api_error_handler(request: Request, exc: BaseAPIError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=get_error_message(exc))

    # Single-tenant tree: the school owned by the signed-in account
    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
    app.include_router(classes.router, prefix="/dashboard/classes", tags=["Classes"])
    app.include_router(students.router, prefix="/dashboard/students", tags=["Students"])
    app.include_router(teachers.router, prefix="/dashboard/teachers", tags=["Teachers"])

    # Multi-tenant tree: /<school>/..., guarded by TenantMiddleware
    app.include_router(auth.tenant_router, tags=["Tenant authentication"])
    app.include_router(dashboard.tenant_router, prefix="/{school}/dashboard", tags=["Tenant dashboard"])
    app.include_router(classes.router, prefix="/{school}/dashboard/classes", tags=["Tenant classes"])
    app.include_router(students.router, prefix="/{school}/dashboard/students", tags=["Tenant students"])
    app.include_router(teachers.router, prefix="/{school}/dashboard/teachers", tags=["Tenant teachers"])

    return app
