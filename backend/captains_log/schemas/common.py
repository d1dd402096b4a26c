from datetime import datetime

from pydantic import BaseModel, Field


class BulkDeleteRequest(BaseModel):
    ids: list[int] = Field(min_length=1)


class BulkResult(BaseModel):
    success: bool = True
    count: int


def ends_before_start(start: datetime | None, end: datetime | None) -> bool:
    """True when both are set, comparable, and ``end`` precedes ``start``.

    Mixed naive/aware pairs are left to the service, which compares them after
    resolving the timezone.
    """
    if start is None or end is None:
        return False
    if (start.tzinfo is None) != (end.tzinfo is None):
        return False
    return end < start
