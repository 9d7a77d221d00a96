from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from colltab.exceptions import CollationBuildError

logger = logging.getLogger(__name__)


@dataclass
class BuildOutcome:
    """First-error-wins latch threaded through every build stage."""

    error: Optional[CollationBuildError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def record(self, error: CollationBuildError | None) -> None:
        if error is None:
            return
        if self.error is None:
            logger.warning("build error recorded: %s", error)
            self.error = error
            return
        logger.debug("build error discarded, one already latched: %s", error)
