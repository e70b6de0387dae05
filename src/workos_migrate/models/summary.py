"""Run summary models."""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class PhaseSummary(BaseModel):
    """Counters for one migration phase."""

    total: int = Field(default=0, description='Records fetched from WorkOS')
    migrated: int = Field(default=0, description='Records written successfully')
    failed: int = Field(default=0, description='Records that failed')


class MigrationSummary(BaseModel):
    """Summary of a migration run."""

    organizations: PhaseSummary = Field(default_factory=PhaseSummary)
    users: PhaseSummary = Field(default_factory=PhaseSummary)
    organization_mapping: Dict[str, str] = Field(
        default_factory=dict,
        description='Source organization ID to destination organization ID',
    )
    dry_run: bool = Field(default=False, description='Run made no writes')

    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = Field(default=None)

    @property
    def results_by_type(self) -> Dict[str, Dict[str, int]]:
        return {
            'organizations': self.organizations.model_dump(),
            'users': self.users.model_dump(),
        }

    @property
    def failed(self) -> int:
        return self.organizations.failed + self.users.failed
