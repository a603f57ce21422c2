from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4


HTTP_TO_CHECK_CODE = {
    400: "CHECK-400",
    404: "CHECK-404",
    405: "CHECK-405",
    422: "CHECK-422",
    500: "CHECK-500",
}


class ConfigurationError(Exception):
    """Broken deployment: missing locale folder, malformed data, bad templates.

    Raised by the core code and left to the process entry point, which
    decides whether to terminate.
    """


class ClientAddressError(ValueError):
    """The peer address of a request could not be determined."""


@dataclass(frozen=True)
class CheckError:
    error_id: str
    error_code: str
    message: str

    def to_response(self) -> dict:
        return {
            "id": self.error_id,
            "code": self.error_code,
            "message": self.message,
        }


def build_error(status_code: int, message: str) -> CheckError:
    return CheckError(
        error_id=f"err_{uuid4().hex[:12]}",
        error_code=HTTP_TO_CHECK_CODE.get(status_code, "CHECK-500"),
        message=message,
    )
