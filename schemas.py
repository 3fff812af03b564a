# schemas.py
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator

DEFAULT_ROAST_COUNT = 7
MAX_ROAST_COUNT = 100

Number = Union[StrictInt, StrictFloat]


# ---------- Request / response contracts ----------

class RoastRequest(BaseModel):
    """
    Inbound roast request.

    Only the camelCase wire names (consecutiveMisses, escalationState) are
    accepted. The counters are passed straight through to the prompt and
    never interpreted. `count` is capped at MAX_ROAST_COUNT.
    """
    habit: StrictStr = Field(min_length=1)
    reason: StrictStr = Field(min_length=1)
    tone: StrictStr = Field(min_length=1)
    streak: Number
    consecutive_misses: Number = Field(alias="consecutiveMisses")
    escalation_state: Number = Field(alias="escalationState")
    count: StrictInt = Field(default=DEFAULT_ROAST_COUNT, ge=1, le=MAX_ROAST_COUNT)

    @field_validator("count", mode="before")
    @classmethod
    def _null_count_means_default(cls, value):
        if value is None:
            return DEFAULT_ROAST_COUNT
        return value


class RoastMessage(BaseModel):
    """One roast triple: text for the prompt screen, the done state and the missed state."""
    model_config = ConfigDict(frozen=True)

    screen: str = ""
    done: str = ""
    missed: str = ""


class RoastResponse(BaseModel):
    roasts: List[RoastMessage]


class ErrorResponse(BaseModel):
    error: str


# ---------- Completion payload decoding ----------

class RoastArray(BaseModel):
    """Completion content was a bare JSON array."""
    kind: Literal["array"] = "array"
    elements: List[Any]


class RoastEnvelope(BaseModel):
    """Completion content was {"roasts": [...]}."""
    kind: Literal["envelope"] = "envelope"
    roasts: List[Any]


class DecodeFailure(BaseModel):
    kind: Literal["failure"] = "failure"
    reason: str


DecodedPayload = Union[RoastArray, RoastEnvelope, DecodeFailure]


# ---------- Generation result ----------

class GenerationSuccess(BaseModel):
    kind: Literal["success"] = "success"
    roasts: List[RoastMessage]


class UpstreamFailure(BaseModel):
    kind: Literal["upstream_failure"] = "upstream_failure"
    reason: str
    status_code: Optional[int] = None


GenerationResult = Union[GenerationSuccess, UpstreamFailure]
