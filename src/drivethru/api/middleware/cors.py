"""
CORS (Cross-Origin Resource Sharing) middleware configuration.

Install scripts and archives are fetched from anywhere, so every origin
is allowed by default. Only GET is exposed.
"""

import os
from typing import Literal

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

DEFAULT_ALLOW_METHODS: list[str] = ["GET"]

DEFAULT_EXPOSE_HEADERS: list[str] = [
    "content-disposition",
    "x-request-id",
    "x-process-time",
]


def get_allowed_origins() -> list[str] | Literal["*"]:
    """Read allowed origins from DRIVETHRU_CORS_ORIGINS (comma separated, default "*")."""
    value = os.getenv("DRIVETHRU_CORS_ORIGINS", "*").strip()
    if value == "*":
        return "*"
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def add_cors_middleware(
    app: FastAPI,
    *,
    allow_origins: list[str] | Literal["*"] | None = None,
    allow_credentials: bool = True,
    allow_methods: list[str] | None = None,
    expose_headers: list[str] | None = None,
    max_age: int = 600,
) -> None:
    """
    Add CORS middleware to the FastAPI application.

    Args:
        app: FastAPI application instance
        allow_origins: List of allowed origins or "*" for all
        allow_credentials: Allow credentials in requests
        allow_methods: List of allowed HTTP methods
        expose_headers: Headers to expose to browsers
        max_age: Cache time for preflight requests (seconds)
    """
    if allow_origins is None:
        allow_origins = get_allowed_origins()
    if allow_origins == "*":
        allow_origins = ["*"]
    if allow_methods is None:
        allow_methods = DEFAULT_ALLOW_METHODS

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=allow_methods,
        expose_headers=expose_headers or DEFAULT_EXPOSE_HEADERS,
        max_age=max_age,
    )
