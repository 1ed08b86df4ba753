from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teamsync.config import settings
from teamsync.core.exceptions import TeamSyncException, UnauthorizedException
from teamsync.core.logging import get_logger, setup_logging
from teamsync.routes import (
    activity_log_routes,
    assignment_routes,
    auth_routes,
    branch_routes,
    client_routes,
    contract_routes,
    employee_routes,
    event_routes,
    invoice_routes,
    plan_routes,
    tenant_routes,
    user_routes,
    webhook_routes,
)

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,  # Disable in production
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
cors_origins = settings.cors_origins_list
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_response(status_code: int, message: str, code: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "code": code},
        headers=headers,
    )


# Exception handlers
@app.exception_handler(TeamSyncException)
async def teamsync_exception_handler(request: Request, exc: TeamSyncException):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedException) else None
    return error_response(exc.status_code, exc.message, exc.code, headers)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"request_path": request.url.path})
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR"
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
    }


# Include routers
app.include_router(auth_routes.router, prefix="/api/auth", tags=["Auth"])
app.include_router(tenant_routes.router, prefix="/api/tenants", tags=["Tenants"])
app.include_router(client_routes.router, prefix="/api/clients", tags=["Clients"])
app.include_router(branch_routes.router, prefix="/api/branches", tags=["Branches"])
app.include_router(employee_routes.router, prefix="/api/employees", tags=["Employees"])
app.include_router(event_routes.router, prefix="/api/events", tags=["Events"])
app.include_router(assignment_routes.router, prefix="/api/assignments", tags=["Assignments"])
app.include_router(contract_routes.router, prefix="/api/contracts", tags=["Contracts"])
app.include_router(invoice_routes.router, prefix="/api/invoices", tags=["Invoices"])
app.include_router(plan_routes.router, prefix="/api/plans", tags=["Plans"])
app.include_router(user_routes.router, prefix="/api/users", tags=["Users"])
app.include_router(activity_log_routes.router, prefix="/api/activity-logs", tags=["Activity Logs"])
app.include_router(webhook_routes.router, prefix="/api/webhooks", tags=["Webhooks"])
