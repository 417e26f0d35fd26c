import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from tastehub.core.db import init_db, close_db
from tastehub.api.v1.purchases import router as purchases_router
from tastehub.api.v1.chat import router as chat_router
from tastehub.api.v1.inventory import router as inventory_router
from tastehub.core.config import PROJECT_NAME, VERSION
from tastehub.core.exception_handlers import setup_exception_handlers

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    await init_db() # Connect to DB and generate schemas
    yield
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    # Configure API documentation and paths
    docs_url="/docs",
    redoc_url="/redoc"
)

# Include routers for modular API structure
app.include_router(purchases_router, prefix="/purchase", tags=["Purchases"])
app.include_router(chat_router, prefix="/api/chat", tags=["Chat"])
app.include_router(inventory_router, prefix="/foods", tags=["Food Stock"])


setup_exception_handlers(app)

@app.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME}
