"""Outcome models for a cleanup run."""

from enum import Enum

from pydantic import BaseModel, Field, StrictInt, StrictStr


class DeletionStatus(str, Enum):
    """Terminal state of one image in the deletion pipeline."""

    DELETED = "deleted"
    DRY_RUN = "dry_run"
    SKIPPED_NO_DATE = "skipped_no_date"
    SKIPPED_TOO_YOUNG = "skipped_too_young"
    DEREGISTER_FAILED = "deregister_failed"


class ImageDeletionOutcome(BaseModel):
    """Result of processing a single candidate image."""

    image_id: StrictStr = Field(..., description="Processed AMI identifier")
    status: DeletionStatus = Field(..., description="Where the pipeline stopped")
    deleted_snapshot_ids: list[StrictStr] = Field(default_factory=list)
    failed_snapshot_ids: list[StrictStr] = Field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.status in (DeletionStatus.SKIPPED_NO_DATE, DeletionStatus.SKIPPED_TOO_YOUNG)


class CleanupResult(BaseModel):
    """Summary of a cleanup run, used for logging and metrics."""

    not_in_use_count: StrictInt = Field(0, description="Candidates returned by the resolver")
    outcomes: list[ImageDeletionOutcome] = Field(default_factory=list)
    not_processed_count: StrictInt = Field(
        0,
        description="Candidates left untouched because the invocation deadline was reached",
    )

    @property
    def deleted_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == DeletionStatus.DELETED)

    @property
    def skipped_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.skipped)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == DeletionStatus.DEREGISTER_FAILED)

    @property
    def snapshots_deleted_count(self) -> int:
        return sum(len(outcome.deleted_snapshot_ids) for outcome in self.outcomes)

    @property
    def snapshots_failed_count(self) -> int:
        return sum(len(outcome.failed_snapshot_ids) for outcome in self.outcomes)

    def summary(self) -> dict[str, int]:
        return {
            "not_in_use": self.not_in_use_count,
            "deleted": self.deleted_count,
            "skipped": self.skipped_count,
            "failed": self.failed_count,
            "snapshots_deleted": self.snapshots_deleted_count,
            "snapshots_failed": self.snapshots_failed_count,
            "not_processed": self.not_processed_count,
        }
