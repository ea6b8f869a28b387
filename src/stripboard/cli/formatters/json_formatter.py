"""JSON output formatter for CLI."""

from __future__ import annotations

import json
from typing import Any

from stripboard.cli.formatters.base import OutputFormat, OutputFormatter
from stripboard.exceptions import StripboardError
from stripboard.models import StripboardModel


def to_jsonable(data: Any) -> Any:
    """Convert models (camelCase for boundary models) and containers to JSON data."""
    if isinstance(data, StripboardModel):
        return data.to_json_dict()
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    if isinstance(data, dict):
        return {str(key): to_jsonable(value) for key, value in data.items()}
    if isinstance(data, list | tuple):
        return [to_jsonable(item) for item in data]
    return data


class JsonFormatter(OutputFormatter[Any]):
    """Generic JSON formatter for CLI output."""

    def format(self, data: Any, format_type: OutputFormat = OutputFormat.JSON) -> str:  # noqa: ARG002
        """Format data as JSON.

        Args:
            data: Data to format
            format_type: Output format type (ignored, always JSON)

        Returns:
            JSON string
        """
        payload = to_jsonable(data)
        if not isinstance(payload, dict | list):
            payload = {"value": payload}
        return json.dumps(payload, default=str, indent=2)

    def format_success(self, message: str, data: Any = None) -> str:
        response: dict[str, Any] = {"success": True, "message": message}
        if data is not None:
            response["data"] = to_jsonable(data)
        return json.dumps(response, default=str, indent=2)

    def format_error_response(self, error: str | Exception, code: int = 1) -> str:
        """Format an error response, keeping hint and details when present."""
        response: dict[str, Any] = {"success": False, "code": code}
        if isinstance(error, StripboardError):
            response["error"] = error.message
            if error.hint:
                response["hint"] = error.hint
            if error.details:
                response["details"] = error.details
        else:
            response["error"] = str(error)
        return json.dumps(response, default=str, indent=2)
