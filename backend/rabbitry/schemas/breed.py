"""
Rabbitry Backend — Pydantic Request/Response Schemas
=====================================================

What:  The API contract: request bodies, response bodies, error envelope.
How:   FastAPI validates request bodies against these models before a route
       runs, serializes responses through them (camelCase on the wire) and
       builds the OpenAPI document from them.

Field rules (character classes are ASCII):

    name            2–64 chars    letters, digits, underscore, space
    description     2–4096 chars  the above plus ASCII whitespace and . , ! " ' $ % @ # ^ & * ( ) ?
    categoryNames[] 2–32 chars    letters, digits, underscore, hyphen, space
    alternateNames[] 2–64 chars   letters, digits, underscore, hyphen, space

Every string must also contain at least one non-whitespace character.
"""

from typing import Annotated, List

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
)
from pydantic.alias_generators import to_camel

from rabbitry.models.breed import (
    ALTERNATE_NAME_MAX,
    BREED_ID_MAX,
    BREED_NAME_MAX,
    CATEGORY_NAME_MAX,
    DESCRIPTION_MAX,
)

NAME_PATTERN = r"^[A-Za-z0-9_ ]+$"
DESCRIPTION_PATTERN = r"""^[A-Za-z0-9_ \t\n\x0B\f\r.,!"'$%@#^&*()?]+$"""
LABEL_PATTERN = r"^[A-Za-z0-9_ -]+$"


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


BreedName = Annotated[
    str,
    StringConstraints(min_length=2, max_length=BREED_NAME_MAX, pattern=NAME_PATTERN),
    AfterValidator(_not_blank),
]
Description = Annotated[
    str,
    StringConstraints(min_length=2, max_length=DESCRIPTION_MAX, pattern=DESCRIPTION_PATTERN),
    AfterValidator(_not_blank),
]
CategoryName = Annotated[
    str,
    StringConstraints(min_length=2, max_length=CATEGORY_NAME_MAX, pattern=LABEL_PATTERN),
    AfterValidator(_not_blank),
]
AlternateName = Annotated[
    str,
    StringConstraints(min_length=2, max_length=ALTERNATE_NAME_MAX, pattern=LABEL_PATTERN),
    AfterValidator(_not_blank),
]


class _CamelModel(BaseModel):
    # Wire names are camelCase; snake_case is accepted on input as well.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Breed Models
# ══════════════════════════════════════════════════════════════════════════


class AddBreedRequest(_CamelModel):
    """
    What:  Body of POST /api/breeds.
    Why no id: the database assigns it on insert.

    Categories and alternate names are optional and default to empty lists.
    Their order is preserved; duplicates are not removed.
    """
    name: BreedName = Field(description="Breed name (unique)")
    description: Description = Field(description="Free-text breed description")
    category_names: List[CategoryName] = Field(
        default_factory=list,
        description="Category tags; unknown ones are created on first use",
    )
    alternate_names: List[AlternateName] = Field(
        default_factory=list,
        description="Other names the breed is known by",
    )


class BreedRecord(AddBreedRequest):
    """
    What:  A full breed aggregate.
    Who:   Returned by every breed endpoint; also the body of PUT /api/breeds.

    Example:
        {
            "id": 14,
            "name": "Dwarf Lop",
            "description": "Dwarf Lops are popular show rabbit breeds.",
            "categoryNames": ["lop-eared", "smooth"],
            "alternateNames": ["Klein Widder", "Mini Lop"]
        }
    """
    id: int = Field(gt=0, le=BREED_ID_MAX, description="Breed ID assigned by the database")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Body of every failure response.

    Example:
        {
            "uri": "/api/breeds/99",
            "message": "Unknown breed with ID=99",
            "status code": 404,
            "timestamp": "Mon, 19 Oct 2026 10:15:00 GMT",
            "reason": "Not Found"
        }
    """
    uri: str = Field(description="Request path")
    message: str = Field(description="Human-readable error description")
    status_code: int = Field(alias="status code", description="HTTP status code")
    timestamp: str = Field(description="RFC 1123 time the error was produced")
    reason: str = Field(description="HTTP reason phrase")


class HealthResponse(BaseModel):
    """Returned by GET /health for load balancers and container probes."""
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
