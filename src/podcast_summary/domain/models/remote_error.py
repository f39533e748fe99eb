"""Remote call failures and their retry classification"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """How a failed remote call should be retried"""

    RATE_LIMIT = "rate_limit"
    TRANSIENT = "transient"


class RemoteCallError(Exception):
    """Failure of a single remote call.

    Raised by remote-call collaborators (LLM providers) so that the retry
    wrapper can classify the failure without scanning error text.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or []


@dataclass(frozen=True)
class QuotaViolation:
    """A quota dimension whose limit was exceeded"""

    quota_id: str
    quota_value: Any = None


@dataclass(frozen=True)
class ErrorClassification:
    """Result of classifying a failed attempt"""

    kind: ErrorKind = ErrorKind.TRANSIENT
    retry_delay: Optional[int] = None  # seconds, server provided
    quota_violations: List[QuotaViolation] = field(default_factory=list)

    @property
    def is_rate_limit(self) -> bool:
        return self.kind == ErrorKind.RATE_LIMIT
