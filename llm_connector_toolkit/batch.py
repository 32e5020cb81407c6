"""Runs a batch of prompts through the turn driver, strictly in order."""

from __future__ import annotations

import logging
from typing import List, Sequence

from .exceptions import BatchInfrastructureError
from .models import TurnOutcome
from .turn import TurnDriver

logger = logging.getLogger(__name__)


class BatchRunner:
    """Processes prompts sequentially; one outcome per prompt, same index."""

    def __init__(self, turn_driver: TurnDriver) -> None:
        self.turn_driver = turn_driver

    async def run(self, prompts: Sequence[str]) -> List[TurnOutcome]:
        """
        Run every prompt and collect its outcome.

        Prompt failures are already isolated by the turn driver. Anything
        escaping that boundary is a defect of the loop itself and aborts the
        batch as a :class:`BatchInfrastructureError`.
        """
        outcomes: List[TurnOutcome] = []
        total = len(prompts)
        try:
            for index, prompt in enumerate(prompts):
                logger.info("Processing prompt %d/%d", index + 1, total)
                outcome = await self.turn_driver.run_turn(prompt)
                if outcome.failed:
                    logger.warning(
                        "Prompt %d/%d failed (%s): %s",
                        index + 1,
                        total,
                        outcome.kind.value if outcome.kind else "unknown",
                        outcome.error,
                    )
                outcomes.append(outcome)
        except Exception as e:
            logger.error("Batch aborted after %d/%d prompts: %s", len(outcomes), total, e)
            raise BatchInfrastructureError(f"Batch processing failed: {e}") from e
        return outcomes
