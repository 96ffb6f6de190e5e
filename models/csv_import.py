"""
CSV import results and the API response envelope.

ImportBatchResult is the in-process outcome of one import call;
ImportResponse is what the API returns for it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


DRY_RUN_MESSAGE = "Import preview (no changes applied)"
LIVE_RUN_MESSAGE = "Import completed: {successes} succeeded, {errors} errors"


class ImportAction(str, Enum):
    """What a successful row did (or would do, in a dry run)."""
    CREATED = "created"
    UPDATED = "updated"


@dataclass
class RowSuccess:
    """Row that was created or upserted."""
    row: int
    sku: str
    action: ImportAction


@dataclass
class RowFailure:
    """Row that was rejected, with a human-readable reason."""
    row: int
    sku: Optional[str]
    error: str


RowOutcome = Union[RowSuccess, RowFailure]


@dataclass
class ImportBatchResult:
    """Result of reconciling one CSV file against a project."""
    total_rows: int = 0
    dry_run: bool = False
    successes: list[RowSuccess] = field(default_factory=list)
    failures: list[RowFailure] = field(default_factory=list)

    @property
    def created(self) -> int:
        return sum(1 for s in self.successes if s.action == ImportAction.CREATED)

    @property
    def updated(self) -> int:
        return sum(1 for s in self.successes if s.action == ImportAction.UPDATED)

    @property
    def error_count(self) -> int:
        return len(self.failures)

    @property
    def outcomes(self) -> list[RowOutcome]:
        """All row outcomes in file order."""
        return sorted([*self.successes, *self.failures], key=lambda o: o.row)


class ImportSummary(BaseModel):
    """Counts block of the import response."""
    total_rows: int
    created: int
    updated: int
    errors: int
    dry_run: bool


class ImportRowError(BaseModel):
    """One failed row as shown to the caller."""
    row: int
    sku: Optional[str] = None
    error: str


class ImportResponse(BaseModel):
    """
    Import response envelope.

    `success` is always true once the file was read: row failures are
    reported through `data.errors` and the `errors` list, never through
    the top-level flag.
    """
    success: bool = True
    data: ImportSummary
    errors: Optional[list[ImportRowError]] = Field(
        None,
        description="Failed rows; omitted when every row succeeded"
    )
    message: str

    @classmethod
    def from_result(cls, result: ImportBatchResult) -> "ImportResponse":
        if result.dry_run:
            message = DRY_RUN_MESSAGE
        else:
            message = LIVE_RUN_MESSAGE.format(
                successes=len(result.successes),
                errors=result.error_count
            )

        return cls(
            success=True,
            data=ImportSummary(
                total_rows=result.total_rows,
                created=result.created,
                updated=result.updated,
                errors=result.error_count,
                dry_run=result.dry_run,
            ),
            errors=[
                ImportRowError(row=f.row, sku=f.sku, error=f.error)
                for f in result.failures
            ] or None,
            message=message,
        )

    def to_dict(self) -> dict:
        """Serialize, dropping `errors` when there are none."""
        body = self.model_dump(exclude={"errors"})
        if self.errors:
            body["errors"] = [e.model_dump() for e in self.errors]
        return body
