"""Schema for client-submitted error reports."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorReport(BaseModel):
    """Error captured by a client application."""

    api_name: str | None = Field(None, alias="apiName", description="API or screen that failed")
    error_detail: Any = Field(None, alias="errorDetail", description="Arbitrary error payload")

    model_config = {"populate_by_name": True}
