"""Shared pydantic base for API payloads (camelCase on the wire, snake_case in Python)."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Accepts both camelCase and snake_case keys; unknown keys are ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def provided(self) -> dict:
        """Fields explicitly present in the request body (for partial updates)."""
        return self.model_dump(exclude_unset=True)
