# llm_connector_toolkit/llm_connector_toolkit/models.py
"""Result records returned by the connector.

Field names serialize to the connector wire format (``Completions``,
``ModelType``, ``Content``, ``TokenUsage``, ``Error``) via aliases while
staying snake_case in Python.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ErrorKind

_RECORD_CONFIG = ConfigDict(
    frozen=True, populate_by_name=True, protected_namespaces=()
)


class TurnOutcome(BaseModel):
    """Raw result of one turn, before normalization.

    Successful turns carry ``content``/``token_usage`` and the model id the
    provider reported; failed turns carry ``error``/``kind`` and the model id
    that was requested.
    """

    model_config = _RECORD_CONFIG

    content: Optional[str] = None
    token_usage: Optional[int] = None
    model_type: Optional[str] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class ContentCompletion(BaseModel):
    model_config = _RECORD_CONFIG

    content: Optional[str] = Field(default=None, alias="Content")
    token_usage: Optional[int] = Field(default=None, alias="TokenUsage")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ErrorCompletion(BaseModel):
    model_config = _RECORD_CONFIG

    error: str = Field(alias="Error")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


Completion = Union[ContentCompletion, ErrorCompletion]


class ConnectorResponse(BaseModel):
    """Batch result: one completion per prompt, in prompt order."""

    model_config = _RECORD_CONFIG

    completions: List[Completion] = Field(alias="Completions")
    model_type: str = Field(alias="ModelType")

    def to_wire(self) -> Dict[str, Any]:
        return {
            "Completions": [completion.to_wire() for completion in self.completions],
            "ModelType": self.model_type,
        }


class ConnectorErrorResponse(BaseModel):
    """Top-level failure; no completions are reported."""

    model_config = _RECORD_CONFIG

    error: str = Field(alias="Error")
    kind: ErrorKind = ErrorKind.BATCH_INFRASTRUCTURE_FAILURE
    model_type: str = Field(alias="ModelType")

    def to_wire(self) -> Dict[str, Any]:
        return {"Error": self.error, "ModelType": self.model_type}
