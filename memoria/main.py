from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn
import logging

from memoria.storage.gateway import build_storage_gateway
from memoria.settings import settings, get_settings
from memoria.routers.auth import router as auth_router
from memoria.routers.gallery import router as gallery_router
from memoria.exceptions import add_exception_handlers

logging.basicConfig(level=settings.log_level)
log = logging.getLogger("memoria")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
        Async context manager for FastAPI application lifecycle events.
        Opens and closes the object storage gateway.
    """
    app.state.storage = build_storage_gateway(get_settings())
    yield
    app.state.storage.close()

# Initialize App
app = FastAPI(
    title=settings.app_title,
    lifespan=lifespan,
    description="Password-gated photo gallery",
)

# Add exception handlers
add_exception_handlers(app)

# CORS - Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add the routers
app.include_router(auth_router)
app.include_router(gallery_router)

# Check Health
@app.get("/")
def read_root():
    """
        Default end point

    """
    return "Memoria is running."

if __name__ == "__main__":
    uvicorn.run("memoria.main:app", host="0.0.0.0", port=8000, reload=True)
