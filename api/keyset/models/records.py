"""Pydantic models for records."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from ..pagination import Cursors, PageInfo


class Record(BaseModel):
    """A row of the records table."""

    id: int = Field(description="Record ID")
    name: str = Field(description="Record name")
    category: Optional[str] = Field(default=None, description="Record category")
    created_at: datetime = Field(description="Creation timestamp")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 20,
                "name": "Quarterly report",
                "category": "reports",
                "created_at": "2024-01-01T12:00:00Z"
            }
        }
    )


class RecordListResponse(BaseModel):
    """Response model for listing records."""

    records: list[Record] = Field(description="Records on this page")
    cursors: Cursors = Field(description="Cursors of the first and last record")
    page_info: Optional[PageInfo] = Field(default=None, alias="pageInfo", description="Neighbouring page existence")
    total_count: Optional[int] = Field(default=None, alias="totalCount", description="Records matching the filter")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "records": [
                    {"id": 20, "name": "Record 20", "category": "reports", "created_at": "2024-01-01T12:00:00Z"},
                    {"id": 19, "name": "Record 19", "category": "reports", "created_at": "2024-01-01T11:30:00Z"}
                ],
                "cursors": {
                    "before": "eyJ0eXBlIjoiaW50IiwidmFsdWUiOiIyMCJ9",
                    "after": "eyJ0eXBlIjoiaW50IiwidmFsdWUiOiIxOSJ9"
                },
                "pageInfo": {"hasPrevPage": False, "hasNextPage": True},
                "totalCount": 37
            }
        }
    )

    def to_response(self) -> dict:
        """Serialize as JSON with camelCase metadata, omitting metadata that was not requested."""
        exclude = set()
        if self.page_info is None:
            exclude.add("page_info")
        if self.total_count is None:
            exclude.add("total_count")
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)
