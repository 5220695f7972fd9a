# --- Entry point for the backend API ---
import logging
from dotenv import load_dotenv

# Import FastAPI components
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Import configuration
from forest_watch import __version__
from forest_watch.config.settings import Settings

# Import API routers
from forest_watch.api.routers import (
    analysis_router,
    proxy_router,
    health_router
)

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger("app")

# Set specific logger levels
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("google_genai").setLevel(logging.WARNING)

# Load environment variables
load_dotenv()

# Create settings
settings = Settings()
logging.getLogger().setLevel(settings.log_level)

# Initialize FastAPI app
app = FastAPI(
    title="Forest Watch",
    description="AI-assisted deforestation analysis backed by Gemini",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router, tags=["Health Check"])
app.include_router(proxy_router, prefix="/api", tags=["Proxy"])
app.include_router(analysis_router, prefix="/api", tags=["Analysis"])

# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Initialize services on startup; a missing API key aborts startup."""
    from forest_watch.services.deforestation_service import create_deforestation_service

    app.state.deforestation_service = create_deforestation_service(settings)
    logger.info(f"Application startup complete: {settings}")

@app.on_event("shutdown")
async def shutdown_event():
    """Clean up on shutdown."""
    logger.info("Application shutdown")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host=settings.host, port=settings.port, reload=settings.reload)
