"""Shared base for persisted documents"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class Document(BaseModel):
    """
    Base for models stored as JSON blobs.

    Blobs use PascalCase keys (CompletionStreak, LastActiveDate, ...);
    snake_case field names are accepted on input as well.
    """
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
    )

    def to_document(self) -> dict:
        """JSON-ready dict with PascalCase keys"""
        return self.model_dump(mode="json", by_alias=True)
