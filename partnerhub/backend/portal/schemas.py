from pydantic import BaseModel, Field
from typing import Any, Literal


class CanonicalPage(BaseModel):
    properties: list[Any] = Field(default_factory=list)
    totalItems: int = Field(0, ge=0)
    totalPages: int = Field(0, ge=0)
    urls: dict[str, Any] | None = None


class CategoriesOut(BaseModel):
    categories: list[dict[str, Any]]
    fallback: bool = False


class StatusOut(BaseModel):
    status: Literal["online", "error"]
    connected: bool
    statusCode: int | None = None
    responseBody: Any = None
    message: str | None = None
    details: dict[str, bool] | None = None
    apiUrl: str | None = None
    env: str
