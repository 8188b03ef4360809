"""Pydantic models for hosted-database change notification webhook payloads."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from logistx.store import ChangeEvent


class ChangeNotification(BaseModel):
    """One row change as posted by the database webhook (`type`, `table`, `schema`, `record`, `old_record`)."""

    type: Literal["INSERT", "UPDATE", "DELETE"]
    table: str
    schema_: str = Field("public", alias="schema")
    record: Optional[dict[str, Any]] = None
    old_record: Optional[dict[str, Any]] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def to_event(self) -> ChangeEvent:
        return ChangeEvent(
            type=self.type,
            table=self.table,
            schema=self.schema_,
            record=self.record,
            old_record=self.old_record,
        )


class ChangeNotificationBatch(BaseModel):
    """Several notifications in one POST under `value`."""

    value: list[ChangeNotification] = Field(default_factory=list)


def parse_notifications(body: Any) -> list[ChangeNotification]:
    """Accept a single notification object, a `{"value": [...]}` batch, or a bare list."""
    if isinstance(body, list):
        return ChangeNotificationBatch.model_validate({"value": body}).value
    if isinstance(body, dict) and "value" in body:
        return ChangeNotificationBatch.model_validate(body).value
    return [ChangeNotification.model_validate(body)]
