import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from marine_ops import __version__
from marine_ops.api.auth.routes import router as auth_router
from marine_ops.api.companies.routes import router as companies_router
from marine_ops.api.marine.routes import router as marine_router
from marine_ops.api.scrap.routes import router as scrap_router
from marine_ops.api.finance.routes import router as finance_router
from marine_ops.api.equity.routes import router as equity_router
from marine_ops.api.admin.routes import router as admin_router
from marine_ops.api.dashboard.routes import router as dashboard_router
from marine_ops.api.errors import setup_exception_handlers
from marine_ops.api.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    RateLimitMiddleware,
    InputValidationMiddleware,
    CSRFProtectionMiddleware
)
from marine_ops.config import config
from marine_ops.db import validate_database_startup
from marine_ops.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Marine Ops API",
    description="Operations dashboard for marine salvage, vessel overhaul and scrap land businesses",
    version=__version__,
    docs_url="/api/docs" if not config.is_production else None,
    redoc_url="/api/redoc" if not config.is_production else None,
    openapi_url="/openapi.json" if not config.is_production else None
)

setup_exception_handlers(app)

# Security middleware (order matters - last added runs first)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(InputValidationMiddleware)
app.add_middleware(CSRFProtectionMiddleware, allowed_origins=config.cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "X-Requested-With",
    ],
)

if config.rate_limit_enabled:
    app.add_middleware(RateLimitMiddleware, default_calls=120, default_period=60)
app.add_middleware(LoggingMiddleware)

app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(companies_router, prefix="/api/v1/companies", tags=["Companies"])
app.include_router(marine_router, prefix="/api/v1/marine", tags=["Marine"])
app.include_router(scrap_router, prefix="/api/v1/scrap", tags=["Scrap"])
app.include_router(finance_router, prefix="/api/v1/finance", tags=["Finance"])
app.include_router(equity_router, prefix="/api/v1/equity", tags=["Equity"])
app.include_router(admin_router, prefix="/api/v1/admin", tags=["Admin"])
app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["Dashboard"])


@app.on_event("startup")
async def startup_event():
    """Validate database connection on startup."""
    try:
        is_valid = await validate_database_startup()
        if not is_valid:
            raise RuntimeError("Database validation failed on startup")
        logger.info(f"Marine Ops API {__version__} started ({config.environment})")
    except Exception as e:
        logger.error(f"Startup validation failed: {e}")
        raise


@app.get("/")
async def root():
    return {"message": "Marine Ops API", "version": __version__}


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "marine-ops-api"}


def main():
    """Run the API with uvicorn."""
    import uvicorn
    uvicorn.run(app, host=config.api_host, port=config.api_port, log_config=None)


if __name__ == "__main__":
    main()
