from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .core.models import DispatchResult, Outcome


class ShareResponse(BaseModel):
    outcome: str
    strategy: str
    supported: bool
    dry_run: bool = False
    filenames: List[str] = Field(default_factory=list)
    diagnostics: Dict[str, str] = Field(default_factory=dict)
    request_id: str

    @classmethod
    def from_result(cls, result: DispatchResult, dry_run: bool = False) -> "ShareResponse":
        return cls(
            outcome=result.outcome.value,
            strategy=result.strategy.value,
            supported=result.supported,
            dry_run=dry_run,
            filenames=result.filenames,
            # Context is only useful to the caller when the share failed
            diagnostics=result.diagnostics if result.outcome is Outcome.FAILURE else {},
            request_id=result.request_id,
        )


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail

    @classmethod
    def create_error(
        cls,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ) -> "ErrorResponse":
        return cls(
            error=ErrorDetail(
                code=code,
                message=message,
                details=details or {},
                suggestions=suggestions or [],
            )
        )


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: int


class LocationsResponse(BaseModel):
    storage_root: Optional[str] = None
    locations: List[str] = Field(default_factory=list)
