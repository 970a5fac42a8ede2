from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import generate
from .config import settings
from .utils.logger import logger

logger.info(f"Starting {settings.app_name} v{settings.app_version}")

app = FastAPI(
    title=settings.app_name,
    description="Room makeover design plan and redesigned image generation API",
    version=settings.app_version,
    debug=settings.debug
)

# CORS (environment-based)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info(f"CORS enabled for origins: {settings.cors_origins}")

app.include_router(generate.router)


@app.get("/health")
async def health_check():
    """Health check and configuration summary"""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "gemini_api_key_configured": bool(settings.gemini_api_key),
        "config": {
            "max_upload_size_mb": settings.max_upload_size_mb,
            "plan_model": settings.plan_model,
            "image_model": settings.image_model,
            "palette_model": settings.palette_model,
        }
    }


@app.on_event("startup")
async def startup_event():
    logger.info("=" * 50)
    logger.info("Application startup")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Gemini API configured: {bool(settings.gemini_api_key)}")
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; every generate request will fail with 500")
    logger.info(f"Max image size: {settings.max_upload_size_mb}MB")
    logger.info("=" * 50)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


def run():
    """Serve the API with uvicorn (makeover-server console script)"""
    import uvicorn
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    run()
