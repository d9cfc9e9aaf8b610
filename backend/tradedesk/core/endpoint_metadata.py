"""Endpoint Metadata — declarative description attached to every admin endpoint.

Invariants:
    - operation_id is unique across the app (ENDPOINT_REGISTRY enforces it)
    - permission, log_module and requires_auth travel into OpenAPI as x-* extensions
    - Standard response sets are built from the resource label, never hand-written per route

Design Decisions:
    - Frozen dataclass + route_kwargs(): routes stay plain FastAPI decorators, the metadata
      object only supplies keyword arguments
    - Re-registering an equal metadata object is allowed (router factories may be
      imported more than once in tests); a different object under the same id is an error
"""

from dataclasses import dataclass, field
from typing import Any


_ERROR_SCHEMA = {
    "type": "object",
    "properties": {
        "error": {
            "type": "object",
            "properties": {
                "code": {"type": "string"},
                "message": {"type": "string"},
                "category": {"type": "string"},
                "severity": {"type": "string"},
                "status_code": {"type": "integer"},
            },
        },
    },
}


def _error_response(description: str) -> dict:
    return {
        "description": description,
        "content": {"application/json": {"schema": _ERROR_SCHEMA}},
    }


_AUTH_RESPONSES = {
    401: _error_response("Unauthorized: missing or invalid access token"),
    403: _error_response("Forbidden: permission denied"),
    500: _error_response("Internal server error"),
}


def _message_response(description: str) -> dict:
    return {
        "description": description,
        "content": {
            "application/json": {
                "schema": {
                    "type": "object",
                    "properties": {"message": {"type": "string"}},
                },
            },
        },
    }


def list_responses(resource: str) -> dict[int, dict]:
    return {
        200: {"description": f"Paginated list of {resource} records"},
        400: _error_response("Invalid query parameters"),
        **_AUTH_RESPONSES,
    }


def single_item_responses(resource: str) -> dict[int, dict]:
    return {
        200: {"description": f"{resource} record"},
        404: _error_response(f"{resource} not found"),
        **_AUTH_RESPONSES,
    }


def create_responses(resource: str) -> dict[int, dict]:
    return {
        200: _message_response(f"{resource} created successfully"),
        400: _error_response("Invalid request data"),
        409: _error_response(f"{resource} already exists"),
        **_AUTH_RESPONSES,
    }


def update_responses(resource: str) -> dict[int, dict]:
    return {
        200: _message_response(f"{resource} updated successfully"),
        400: _error_response("Invalid request data"),
        404: _error_response(f"{resource} not found"),
        409: _error_response(f"{resource} conflicts with an existing record"),
        **_AUTH_RESPONSES,
    }


def delete_responses(resource: str) -> dict[int, dict]:
    return {
        200: _message_response(f"{resource} removed successfully"),
        404: _error_response(f"{resource} not found"),
        **_AUTH_RESPONSES,
    }


def bulk_delete_responses(resource: str) -> dict[int, dict]:
    return {
        200: _message_response(f"{resource} records removed successfully"),
        400: _error_response("No ids provided"),
        **_AUTH_RESPONSES,
    }


def status_update_responses(resource: str) -> dict[int, dict]:
    return {
        200: _message_response(f"{resource} status updated successfully"),
        400: _error_response("Invalid status"),
        404: _error_response(f"{resource} not found"),
        **_AUTH_RESPONSES,
    }


@dataclass(frozen=True)
class EndpointMetadata:
    summary: str
    operation_id: str
    tags: tuple[str, ...]
    permission: str | None = None
    requires_auth: bool = True
    log_module: str | None = None
    log_title: str | None = None
    description: str | None = None
    responses: dict[int, dict] | None = None
    demo_mask: tuple[str, ...] = field(default_factory=tuple)

    @property
    def title(self) -> str:
        return self.log_title or self.summary

    def route_kwargs(self) -> dict[str, Any]:
        extra: dict[str, Any] = {"x-requires-auth": self.requires_auth}
        if self.permission:
            extra["x-permission"] = self.permission
        if self.log_module:
            extra["x-log-module"] = self.log_module
        return {
            "summary": self.summary,
            "operation_id": self.operation_id,
            "tags": list(self.tags),
            "description": self.description or self.summary,
            "responses": self.responses or {},
            "openapi_extra": extra,
        }


ENDPOINT_REGISTRY: dict[str, EndpointMetadata] = {}


def register_endpoint(metadata: EndpointMetadata) -> EndpointMetadata:
    existing = ENDPOINT_REGISTRY.get(metadata.operation_id)
    if existing is not None and existing != metadata:
        raise ValueError(f"Duplicate operation id '{metadata.operation_id}'")
    ENDPOINT_REGISTRY[metadata.operation_id] = metadata
    return metadata
