#!/usr/bin/env python3
"""
FastAPI app for the property chat assistant.
The property collection is built (or read from processedProperties.json) once at
startup and shared read-only by every request.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from config import Settings, get_settings
from processor.models import Property
from processor.pipeline import load_property_collection
from processor.search import search_specific_property
from services.assistant import PropertyAssistant

load_dotenv()

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

GENERIC_ERROR = "Sorry, I encountered an error processing your request."

# =============================================================================
# Pydantic Models
# =============================================================================

class ChatRequest(BaseModel):
    message: Any = Field(default=None, description="Natural-language property query")


class HealthResponse(BaseModel):
    status: str
    message: str
    data: Dict[str, Any]


# =============================================================================
# App factory
# =============================================================================

def create_app(settings: Optional[Settings] = None, properties: Optional[List[Property]] = None) -> FastAPI:
    """Build the API; pass ``properties`` to skip loading from disk (tests, scripts)."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Property Chatbot API starting up...")
        collection = properties if properties is not None else load_property_collection(settings)
        app.state.properties = collection
        app.state.assistant = PropertyAssistant.from_settings(collection, settings)
        logger.info(f"Serving {len(collection)} properties")
        yield
        logger.info("Property Chatbot API shutting down...")

    app = FastAPI(
        title="Property Chatbot API",
        version="1.0.0",
        description="Chat-driven property search over merged project listings",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def handle_exception(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"success": False, "error": GENERIC_ERROR})

    # =========================================================================
    # API Endpoints
    # =========================================================================

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Fast health check endpoint for load balancers."""
        return HealthResponse(
            status="OK",
            message="Property Chatbot API is running",
            data={"totalProperties": len(request.app.state.properties)},
        )

    @app.get("/")
    async def root():
        return {
            "message": "Property Chatbot API",
            "version": "1.0.0",
            "endpoints": {
                "health": "/health",
                "chat": "/api/properties/chat (POST)",
                "search": "/api/properties/search/{query}",
                "all": "/api/properties/all?limit=50",
                "debug": "/api/debug/data",
                "docs": "/docs",
            },
        }

    @app.post("/api/properties/chat")
    def chat(req: ChatRequest, request: Request):
        message = req.message.strip() if isinstance(req.message, str) else ""
        if not message:
            return JSONResponse(status_code=400, content={"success": False, "error": "Message is required"})
        try:
            return request.app.state.assistant.chat(message)
        except Exception as e:
            logger.exception(f"Chat error: {e}")
            return JSONResponse(status_code=500, content={"success": False, "error": GENERIC_ERROR})

    @app.get("/api/properties/search/{query}")
    def search(query: str, request: Request):
        results = search_specific_property(query, request.app.state.properties)
        return {
            "success": True,
            "properties": [p.to_dict() for p in results],
            "totalMatches": len(results),
        }

    @app.get("/api/properties/all")
    def all_properties(request: Request, limit: int = Query(default=settings.default_list_limit, ge=0)):
        collection = request.app.state.properties
        return {
            "properties": [p.to_dict() for p in collection[:limit]],
            "total": len(collection),
        }

    @app.get("/api/debug/data")
    def debug_data(request: Request):
        collection = request.app.state.properties
        sample = [
            {
                "name": p.project_name,
                "city": p.city,
                "locality": p.locality,
                "bhk": p.bhk,
                "price": p.price,
                "possession": p.possession,
                "area": p.area,
                "fullAddress": p.full_address,
            }
            for p in collection[:5]
        ]
        return {
            "totalProperties": len(collection),
            "sample": sample,
            "cities": list(dict.fromkeys(p.city for p in collection if p.city)),
        }

    return app


app = create_app()

# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    port_env = os.environ.get("PORT", "3001")

    try:
        # Handle template variables that might not be resolved
        if port_env.startswith("$"):
            port = 3001
            logger.warning(f"PORT env var appears to be unresolved: {port_env}, using default 3001")
        else:
            port = int(port_env)

        if port < 1 or port > 65535:
            port = 3001
            logger.warning(f"Invalid port {port_env}, using default 3001")

    except (ValueError, TypeError):
        port = 3001
        logger.warning(f"Invalid PORT value '{port_env}', using default 3001")

    logger.info(f"Starting FastAPI server on 0.0.0.0:{port}")

    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=port,
        log_level="info",
        access_log=True,
    )
