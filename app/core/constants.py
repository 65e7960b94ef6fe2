"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
common response definitions and the email template environment.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    AUTH = RouteConfig(prefix="/auth", tag="auth")
    NOTES = RouteConfig(prefix="/notes", tag="notes")
    HEALTH = RouteConfig(prefix="/health", tag="health")


# Common response definitions for reuse across routers
class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    UNAUTHORIZED: dict[int, dict[str, Any]] = {
        401: {"description": "Missing, invalid or expired token, or unverified user"}
    }
    NOT_FOUND: dict[int, dict[str, Any]] = {404: {"description": "Resource not found"}}
    CONFLICT: dict[int, dict[str, Any]] = {
        409: {"description": "Resource already exists"}
    }
    BAD_REQUEST: dict[int, dict[str, Any]] = {
        400: {"description": "Invalid request data"}
    }
    TOO_MANY_REQUESTS: dict[int, dict[str, Any]] = {
        429: {"description": "Request ceiling exceeded"}
    }


# Redirect markers understood by the browser client
class RedirectMarkers:
    SUCCESS = {"auth": "success"}
    AUTH_FAILED = {"error": "auth_failed"}
    GOOGLE_FAILED = {"error": "google_auth_failed"}


# HTML Templates Directory
EmailTemplatesDir = Path(__file__).parent.parent / "templates" / "emails"

JinjaEmailTemplatesEnv = Environment(
    loader=FileSystemLoader(str(EmailTemplatesDir)),
    autoescape=select_autoescape(["html", "xml"]),
    undefined=StrictUndefined,
)
