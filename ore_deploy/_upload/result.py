"""UploadResult dataclass for plugin upload output."""

from dataclasses import dataclass
from typing import Literal, Optional

from ..exceptions import TransportError, UploadRejected

UploadOutcome = Literal["success", "rejected", "transport_error"]


@dataclass
class UploadResult:
    """
    Result of a plugin upload attempt.

    Attributes:
        outcome: "success", "rejected" or "transport_error"
        status_code: HTTP status code, if a response was received
        status_line: HTTP status line, e.g. "400 Bad Request"
        response_body: Fully drained response body of a rejected upload
        cause: Exception behind a transport error
    """

    outcome: UploadOutcome
    status_code: Optional[int] = None
    status_line: Optional[str] = None
    response_body: Optional[str] = None
    cause: Optional[BaseException] = None

    def __post_init__(self) -> None:
        """Validate result state."""
        if self.outcome == "transport_error" and self.cause is None:
            raise ValueError("Transport error result must have a cause")
        if self.outcome == "rejected" and self.status_code is None:
            raise ValueError("Rejected result must have a status_code")
        if self.outcome != "transport_error" and self.cause is not None:
            raise ValueError("Only transport error results carry a cause")

    @property
    def success(self) -> bool:
        return self.outcome == "success"

    @property
    def error_message(self) -> Optional[str]:
        """Human-readable failure description, None on success."""
        if self.outcome == "rejected":
            return f"Remote endpoint returned an unsuccessful response: {self.status_line}\n{self.response_body or ''}"
        if self.outcome == "transport_error":
            return f"Upload failed due to IO error: {self.cause}"
        return None

    def raise_for_outcome(self) -> None:
        """
        Raise the matching exception for a failed upload.

        Raises:
            UploadRejected: The server answered with a non-201 status
            TransportError: The request failed before a response arrived
        """
        if self.outcome == "rejected" and self.status_code is not None:
            raise UploadRejected(self.status_code, self.status_line or str(self.status_code), self.response_body or "")
        if self.outcome == "transport_error" and self.cause is not None:
            raise TransportError(self.cause) from self.cause

    @classmethod
    def success_result(cls, status_code: int = 201, status_line: Optional[str] = None) -> "UploadResult":
        """Create a successful upload result."""
        return cls(outcome="success", status_code=status_code, status_line=status_line)

    @classmethod
    def rejected_result(cls, status_code: int, status_line: str, response_body: str) -> "UploadResult":
        """Create a result for an upload the server refused."""
        return cls(
            outcome="rejected",
            status_code=status_code,
            status_line=status_line,
            response_body=response_body,
        )

    @classmethod
    def transport_error_result(cls, cause: BaseException) -> "UploadResult":
        """Create a result for an upload that failed at the network or I/O level."""
        return cls(outcome="transport_error", cause=cause)
