"""Admin API application"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.health import router as health_router
from storefront.api.v1 import api_router
from storefront.core.config import settings
from storefront.services.document_store import DocumentStore

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(document_store: Optional[DocumentStore] = None) -> FastAPI:
    """Build the API; without a store, Firestore is connected at startup"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting up {settings.APP_NAME}...")
        if document_store is None:
            from storefront.core.firebase import get_firestore_client
            from storefront.services.document_store import FirestoreDocumentStore
            app.state.document_store = FirestoreDocumentStore(get_firestore_client())
        else:
            app.state.document_store = document_store

        yield

        logger.info(f"Shutting down {settings.APP_NAME}...")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Admin API for the Sparsh NFC storefront",
        version=settings.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
