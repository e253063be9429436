"""User Graph - FastAPI Application.

GraphQL gateway exposing users and companies stored in a REST backend.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_graph.api.graphql import graphql_router, registry
from user_graph.backend import RestBackend
from user_graph.config import get_settings

logger = logging.getLogger("user_graph")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"🚀 Starting {settings.service_name} v{settings.service_version}")
    logger.info(f"📊 Schema types: {', '.join(registry.names())}")

    await RestBackend.connect()
    logger.info(f"✅ REST backend: {settings.backend_url}")

    yield

    # Shutdown
    await RestBackend.disconnect()
    logger.info("👋 REST backend client closed")


settings = get_settings()

app = FastAPI(
    title="User Graph",
    description="""
    ## GraphQL gateway over a REST users/companies backend

    ### GraphQL Endpoint: `/graphql`

    ```graphql
    query {
        user(id: "23") {
            firstName
            age
            company { name users { firstName } }
        }
    }
    ```
    """,
    version=settings.service_version,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# GraphQL router
app.include_router(graphql_router, prefix="/graphql")


@app.get("/")
async def root() -> dict:
    """Root endpoint with service info."""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "graphql": "/graphql",
        "schema": "/graphql/schema",
        "docs": "/docs",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "backend": "connected" if RestBackend.is_connected() else "disconnected",
        "backend_url": settings.backend_url,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "user_graph.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
