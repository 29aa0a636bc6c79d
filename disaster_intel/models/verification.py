from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class VerificationRecord(BaseModel):
    """Authenticity assessment of a disaster image."""
    model_config = ConfigDict(frozen=True)

    verified: bool
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str
    manipulation_detected: bool

    @classmethod
    def api_key_missing(cls) -> "VerificationRecord":
        return cls(verified=False, confidence=0.0, reason="API key not available",
                   manipulation_detected=False)

    @classmethod
    def failed(cls) -> "VerificationRecord":
        return cls(verified=False, confidence=0.0, reason="Verification failed",
                   manipulation_detected=False)


class VerificationSource(str, Enum):
    """How a verification record was derived from provider text."""
    STRUCTURED = "structured"
    HEURISTIC = "heuristic"


@dataclass(frozen=True)
class VerificationOutcome:
    """A verification record tagged with the parse path that produced it."""
    record: VerificationRecord
    source: VerificationSource

    @property
    def structured(self) -> bool:
        return self.source is VerificationSource.STRUCTURED
