"""Upsert result model."""

from pydantic import BaseModel


class UpsertResult(BaseModel):
    """Counts reported by an insert-or-skip batch."""

    inserted: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.skipped
