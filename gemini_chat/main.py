"""
Gemini Chat FastAPI Application

This is the main FastAPI application entry point.
It sets up the app, middleware, and includes all routes.
"""

import logging

from fastapi import FastAPI

from .config import get_settings
from .web.routes import router as web_router
from .middleware.timing import TimingMiddleware
from .middleware.cors import CorsMiddleware

settings = get_settings()

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)

# Create FastAPI app
app = FastAPI(
    title="Gemini Chat API",
    version="0.1.0",
    description="Chat proxy to Google Gemini with Supabase-backed image storage and chat history"
)

# Timing first so CORS wraps it and also decorates its error responses
app.add_middleware(TimingMiddleware)
app.add_middleware(CorsMiddleware)

# Include web routes
app.include_router(web_router)


# Health check endpoint
@app.get("/health")
def health_check():
    """Health check endpoint for monitoring"""
    return {"status": "healthy", "service": "gemini-chat-api"}
