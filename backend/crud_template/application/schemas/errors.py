"""Uniform error payload."""

from crud_template.application.schemas.base import ApiSchema


class ErrorResponse(ApiSchema):
    """Body of every error response: ``{isCustomException, messages, errorType}``."""

    is_custom_exception: bool = False
    messages: list[str] = []
    error_type: str
