"""Maps raw turn outcomes into the connector's public result shape."""

from __future__ import annotations

import json
import logging
from typing import List, Sequence

from .exceptions import ErrorKind, LLMConnectorError
from .models import (
    Completion,
    ConnectorResponse,
    ContentCompletion,
    ErrorCompletion,
    TurnOutcome,
)

logger = logging.getLogger(__name__)


def describe_error(error: BaseException) -> str:
    """Human-readable message of ``error``, or a serialized form when it has none."""
    message = str(error)
    if message:
        return message
    try:
        return json.dumps(vars(error)) if vars(error) else repr(error)
    except (TypeError, ValueError):
        return repr(error)


def map_error_to_outcome(error: BaseException, model: str) -> TurnOutcome:
    """Convert a failure into an error outcome tagged with the requested model."""
    kind = (
        error.kind if isinstance(error, LLMConnectorError) else ErrorKind.UNEXPECTED_ERROR
    )
    return TurnOutcome(error=describe_error(error), kind=kind, model_type=model)


def to_completion(outcome: TurnOutcome) -> Completion:
    if outcome.failed:
        return ErrorCompletion(error=outcome.error)
    return ContentCompletion(content=outcome.content, token_usage=outcome.token_usage)


def map_to_response(outcomes: Sequence[TurnOutcome], model: str) -> ConnectorResponse:
    """
    Build the batch result: exactly one completion per outcome, in order.

    ``model_type`` is the model id of the first outcome that carries one,
    falling back to the requested ``model``.
    """
    completions: List[Completion] = [to_completion(outcome) for outcome in outcomes]
    model_type = next(
        (outcome.model_type for outcome in outcomes if outcome.model_type), model
    )
    logger.debug(
        "Normalized %d outcomes (%d failed). Model type: %s",
        len(outcomes),
        sum(1 for outcome in outcomes if outcome.failed),
        model_type,
    )
    return ConnectorResponse(completions=completions, model_type=model_type)
