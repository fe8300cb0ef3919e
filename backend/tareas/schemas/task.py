"""
Tareas Backend: Pydantic Request/Response Schemas
=================================================

What:  Pydantic models defining the API contract and the values passed
       between the capability interfaces and the services.
Why:   Schemas are separate from the SQLAlchemy model so the task store
       interface does not leak ORM objects; in-memory stores and the SQL
       store hand back the same `TaskResponse` type.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Identity
# ══════════════════════════════════════════════════════════════════════════


class Principal(BaseModel):
    """The authenticated identity associated with a request."""
    id: str = Field(description="Opaque user id issued by the identity service")
    email: Optional[str] = Field(default=None, description="Account email, if known")

    model_config = {"frozen": True}


class AuthSession(BaseModel):
    """
    What:  Result of a successful password sign-in.
    How:   access_token goes into the httpOnly session cookie; it is the
           credential later handed back to IdentityProvider.validate_credential().
    """
    access_token: str
    principal: Principal
    expires_in: Optional[int] = Field(
        default=None,
        description="Token lifetime in seconds as reported by the identity service",
    )


# ══════════════════════════════════════════════════════════════════════════
# Tasks
# ══════════════════════════════════════════════════════════════════════════


class TaskCreate(BaseModel):
    """
    Body of POST /api/tareas.

    `texto` is accepted as an alias for clients written against the
    original Spanish field name.
    """
    text: str = Field(
        default="",
        validation_alias=AliasChoices("text", "texto"),
        description="Task text; blank or whitespace-only text is rejected",
    )


class TaskResponse(BaseModel):
    """
    What:  Full representation of a task.
    Who:   Returned by the task stores and by GET/POST /api/tareas.
    """
    id: uuid.UUID = Field(description="Unique task identifier (UUID)")
    user_id: str = Field(description="Owning principal id")
    text: str = Field(description="Task text")
    done: bool = Field(default=False, description="Completion flag")
    created_at: datetime = Field(description="When the task was created (UTC ISO 8601)")

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_authenticated",
            "message": "Not authenticated",
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    identity: str = Field(description="Identity service: configured, unconfigured, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
