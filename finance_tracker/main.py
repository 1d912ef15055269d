import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from finance_tracker.config import settings
from finance_tracker.core.log_config import configure_logging
from finance_tracker.core.exceptions import (
    UnauthorizedException,
    NotFoundException,
    ForbiddenException,
    ValidationException,
    ConflictException,
    InvalidTokenException,
    InvitationExpiredException,
)
from finance_tracker.routes import (
    account_routes,
    balance_routes,
    invitation_routes,
    liability_routes,
    organization_routes,
)

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

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


# Exception handlers
@app.exception_handler(UnauthorizedException)
async def unauthorized_exception_handler(request: Request, exc: UnauthorizedException):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request: Request, exc: NotFoundException):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(ForbiddenException)
async def forbidden_exception_handler(request: Request, exc: ForbiddenException):
    content = {"detail": str(exc)}
    if exc.action is not None:
        content["action"] = exc.action.value
    if exc.required_role is not None:
        content["required_role"] = exc.required_role.value
    logger.info("Forbidden %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=content)


@app.exception_handler(ValidationException)
async def validation_exception_handler(request: Request, exc: ValidationException):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc), "errors": exc.errors},
    )


@app.exception_handler(ConflictException)
async def conflict_exception_handler(request: Request, exc: ConflictException):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(InvalidTokenException)
async def invalid_token_exception_handler(request: Request, exc: InvalidTokenException):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvitationExpiredException)
async def invitation_expired_exception_handler(request: Request, exc: InvitationExpiredException):
    return JSONResponse(status_code=status.HTTP_410_GONE, content={"detail": str(exc)})


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
app.include_router(organization_routes.router, prefix="/api/organizations", tags=["Organizations"])
app.include_router(account_routes.router, prefix="/api/accounts", tags=["Accounts"])
app.include_router(liability_routes.router, prefix="/api/liabilities", tags=["Liabilities"])
app.include_router(balance_routes.router, prefix="/api/balances", tags=["Balances"])
app.include_router(invitation_routes.router, prefix="/api/invitations", tags=["Invitations"])
