"""Indexing result models — Per-document outcome of index and remove calls,
plus the backend acknowledgements they are built from."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IndexingResultItem(BaseModel):
    id: str = Field(description="Document identifier")
    succeeded: bool = Field(default=True)
    error_message: str = Field(default="")


class IndexingResult(BaseModel):
    """Ordered outcome of one indexing or removal batch."""

    items: list[IndexingResultItem] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(item.succeeded for item in self.items)


# ── Backend acknowledgements ─────────────────────────────────────────────────


class IndexDescriptor(BaseModel):
    """An entry of ``GET /1/indexes``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    entries: int = 0
    updated_at: str | None = Field(default=None, alias="updatedAt")


class TaskAck(BaseModel):
    """Acknowledgement of an asynchronous backend write."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    task_id: int | None = Field(default=None, alias="taskID")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class BatchAck(TaskAck):
    """Acknowledgement of one sub-batch, listing the object ids it touched."""

    object_ids: list[str] = Field(default_factory=list, alias="objectIDs")


class BatchResponse(BaseModel):
    """All sub-batch acknowledgements of one save or delete call."""

    responses: list[BatchAck] = Field(default_factory=list)
