"""Per-invocation pipeline context.

Each unify or analyze run builds one context and passes it explicitly to
the stages it calls, so concurrent runs never share a logger or clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from core.config import MosaicConfig
from core.logging_config import get_logger


@dataclass(frozen=True)
class RunContext:
    """Context shared by the stages of one pipeline run.

    Attributes:
        config: Runtime configuration.
        run_id: Unique id bound to every log event of the run.
        reference_time: UTC "now" used for future-date checks and recency.
        logger: Structured logger bound with the run id.
    """

    config: MosaicConfig
    run_id: str
    reference_time: datetime
    logger: Any

    @classmethod
    def create(
        cls,
        config: MosaicConfig,
        reference_time: datetime | None = None,
        run_id: str | None = None,
    ) -> "RunContext":
        """Create a context for one pipeline invocation.

        Args:
            config: Runtime configuration.
            reference_time: Optional fixed clock, defaults to current UTC time.
            run_id: Optional explicit run id.

        Returns:
            New run context.
        """
        resolved_run_id = run_id or _build_run_id()
        resolved_time = reference_time or datetime.now(timezone.utc)
        if resolved_time.tzinfo is None:
            resolved_time = resolved_time.replace(tzinfo=timezone.utc)
        return cls(
            config=config,
            run_id=resolved_run_id,
            reference_time=resolved_time,
            logger=get_logger("mosaic.pipeline", run_id=resolved_run_id),
        )

    @property
    def timestamp(self) -> str:
        """Return the reference time as an ISO timestamp."""
        return self.reference_time.isoformat()


def _build_run_id() -> str:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    return f"run-{timestamp}-{uuid4().hex[:8]}"
