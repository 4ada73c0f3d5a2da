"""Pydantic models for validated destination node settings."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..encoder import DEFAULT_DATABASE, DocumentLayout
from .items import MAX_NAME_LEN

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 27017
DEFAULT_TIMEOUT_MS = 1000


class NodeSettings(BaseModel):
    """Settings of one ``<Node>`` block."""

    name: str
    host: str | None = None
    port: int = Field(default=0, ge=0, le=65535, description="0 selects the client default")
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, ge=0, description="Milliseconds, 0 keeps the client default")
    database: str = DEFAULT_DATABASE
    user: str | None = None
    password: str | None = None
    layout: DocumentLayout = DocumentLayout.LEGACY

    @field_validator("name", mode="before")
    @classmethod
    def _bound_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value[: MAX_NAME_LEN - 1]
        return value

    @field_validator("database")
    @classmethod
    def _validate_database(cls, value: str) -> str:
        if not value or "." in value or " " in value:
            raise ValueError(f"Invalid database name: {value!r}")
        return value

    @property
    def endpoint_host(self) -> str:
        return self.host if self.host is not None else DEFAULT_HOST

    @property
    def endpoint_port(self) -> int:
        return self.port if self.port != 0 else DEFAULT_PORT

    @property
    def callback_name(self) -> str:
        return f"write_mongo/{self.name}"[: MAX_NAME_LEN - 1]


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT_MS",
    "NodeSettings",
]
