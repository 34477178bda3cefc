"""Application configuration."""

from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    """Settings for the HTTP boundary and storage layer."""

    app_name: str = Field(
        default="Contacts",
        description="Title shown in the OpenAPI docs",
    )
    reveal_foreign_contacts: bool = Field(
        default=False,
        description=(
            "Answer 403 when a contact exists but belongs to another user. "
            "When False the response is the same 404 as for a missing contact."
        ),
    )
    database_max_retries: int = Field(
        default=3,
        description="Retries for transient database connectivity failures",
        ge=0,
        le=10,
    )
