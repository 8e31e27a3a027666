"""
REST API main application.
Entry point for the FastAPI server.
"""

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from latebites_shared.config.settings import settings
from latebites_shared.security import limiter, rate_limit_exceeded_handler
from latebites_api.core import configure_cors, lifespan, register_middlewares
from latebites_api.routers.auth import callback_router, session_router
from latebites_api.routers.customer import orders_router, profile_router, reservations_router
from latebites_api.routers.public import catalog_router, health_router, onboarding_router


# Endpoints answering with {"error": message} instead of {"detail": ...}
ERROR_BODY_PATHS = ("/api/onboard", "/api/verify")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid onboarding input is a 400 with a single message."""
    if request.url.path in ERROR_BODY_PATHS:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"Invalid {field}: {first.get('msg')}" if field else "All fields are required"
        return JSONResponse(status_code=400, content={"error": message})
    return await request_validation_exception_handler(request, exc)


app = FastAPI(
    title="Latebites API",
    description="Surplus food rescue marketplace API",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

register_middlewares(app)
configure_cors(app)


# =============================================================================
# Include Routers
# =============================================================================

# Public
app.include_router(health_router)
app.include_router(catalog_router)
app.include_router(onboarding_router)

# Auth
app.include_router(session_router)
app.include_router(callback_router)

# Customer
app.include_router(reservations_router)
app.include_router(orders_router)
app.include_router(profile_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "latebites_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
