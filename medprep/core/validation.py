# medprep/core/validation.py
"""
Request validation shared by body, query and path parameters.

Route parameters are declared with the schemas and annotated types below so
FastAPI validates them; failures from any of the three locations are turned
into a single ValidationError by the same formatter that `validate_payload`
uses for ad-hoc payloads.
"""

from typing import Annotated, Any, Dict, Iterable, List, Optional, Type, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from medprep.core.config import MAX_PAGE_SIZE
from medprep.core.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Message prefix per injection point, in the order the checks run.
LOCATION_PREFIXES: Dict[str, str] = {
    "path": "Parameter validation failed",
    "query": "Query validation failed",
    "body": "Validation failed",
}


# ===== FIELD TYPES =====


def _check_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError("Invalid email format") from e
    return value


def _check_resource_id(value: str) -> str:
    if not value.strip():
        raise ValueError("Resource ID is required")
    return value


Email = Annotated[str, AfterValidator(_check_email)]
ResourceId = Annotated[str, AfterValidator(_check_resource_id)]


# ===== SHARED SCHEMAS =====


class EmailParams(BaseModel):
    email: Email

    model_config = ConfigDict(extra="forbid")


class ResourceIdParams(BaseModel):
    resource_id: ResourceId

    model_config = ConfigDict(extra="forbid")


class ResourceDownloadParams(BaseModel):
    email: Email
    resource_id: ResourceId

    model_config = ConfigDict(extra="forbid")


class PaginationQuery(BaseModel):
    """Page/limit arrive as numeric strings and are coerced to ints."""

    page: Optional[int] = None
    limit: Optional[int] = None

    @field_validator("page")
    @classmethod
    def page_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("Page must be greater than 0")
        return v

    @field_validator("limit")
    @classmethod
    def limit_in_range(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not (0 < v <= MAX_PAGE_SIZE):
            raise ValueError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        return v


# ===== ERROR FORMATTING =====


def _error_message(error: Dict[str, Any]) -> str:
    """Human readable reason for one pydantic error entry."""
    ctx = error.get("ctx") or {}
    if error.get("type") == "value_error" and "error" in ctx:
        # Custom validators carry their own complete message
        return str(ctx["error"])

    field = ".".join(
        str(part) for part in error.get("loc", ()) if part not in LOCATION_PREFIXES
    )
    msg = error.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[str]:
    """One message per violated field, in the order pydantic reported them."""
    return [_error_message(error) for error in errors]


def validation_error_from_errors(errors: List[Dict[str, Any]]) -> ValidationError:
    """Build the ValidationError for FastAPI request validation errors.

    Locations are checked path first, then query, then body; the first
    location with violations rejects the request and all of its violations
    are reported.
    """
    by_location: Dict[str, List[Dict[str, Any]]] = {}
    for error in errors:
        loc = error.get("loc") or ("body",)
        by_location.setdefault(str(loc[0]), []).append(error)

    for location, prefix in LOCATION_PREFIXES.items():
        if location in by_location:
            messages = format_validation_errors(by_location[location])
            return ValidationError(f"{prefix}: {', '.join(messages)}", errors=messages)

    messages = format_validation_errors(errors)
    return ValidationError(f"Validation failed: {', '.join(messages)}", errors=messages)


def validate_payload(schema: Type[SchemaT], payload: Any, location: str = "body") -> SchemaT:
    """
    Validate and coerce a payload against a schema.

    Args:
        schema: Pydantic model describing the expected shape
        payload: Raw body, query or path-parameter mapping
        location: One of "body", "query" or "path"; selects the message prefix

    Returns:
        The coerced model instance

    Raises:
        ValidationError: listing every violated field
    """
    prefix = LOCATION_PREFIXES.get(location, LOCATION_PREFIXES["body"])
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        messages = format_validation_errors(e.errors())
        raise ValidationError(f"{prefix}: {', '.join(messages)}", errors=messages) from e
