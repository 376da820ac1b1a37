from enum import Enum


class GenerationStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class HistorySortField(str, Enum):
    """Client-facing sort keys mapped to columns."""

    CREATED_AT = "createdAt"
    COMPLETED_AT = "completedAt"

    @property
    def column_name(self) -> str:
        return {"createdAt": "created_at", "completedAt": "completed_at"}[self.value]


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
