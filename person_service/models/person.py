"""
Person domain model
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Person(BaseModel):
    """
    A person record keyed by email.

    Serialized with camelCase field names (``firstName``, ``lastName``,
    ``yearBirth``); either the alias or the attribute name is accepted on input.
    Equality is structural over all four fields.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., description="Unique key of the record, stored exactly as given")
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    year_birth: int = Field(0, alias="yearBirth")

    @field_validator("email")
    @classmethod
    def email_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Email is required")
        return v

    @field_validator("year_birth", mode="before")
    @classmethod
    def year_birth_null_as_zero(cls, v):
        # null reads as an unset year, same as an absent field
        return 0 if v is None else v

    def to_payload(self) -> dict:
        """JSON-ready representation used on the wire and in HTTP responses"""
        return self.model_dump(by_alias=True)
