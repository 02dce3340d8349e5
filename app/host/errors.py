"""
Error reporting channels offered by the host.
"""
from dataclasses import dataclass
from typing import List


class RequestHalted(Exception):
    """Raised to abort the in-flight request with a user-facing message."""

    def __init__(self, message: str, status_code: int = 403):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class ErrorEntry:
    """One message attached to an ErrorCollection."""
    code: str
    message: str
    blocking: bool = True


class ErrorCollection:
    """Errors gathered while handling a form submission.

    Blocking entries cancel the host's own save; non-blocking entries are shown
    to the user but let the save go through.
    """

    def __init__(self):
        self._entries: List[ErrorEntry] = []

    def add(self, code: str, message: str, blocking: bool = True) -> None:
        self._entries.append(ErrorEntry(code=code, message=message, blocking=blocking))

    def has_blocking(self) -> bool:
        return any(entry.blocking for entry in self._entries)

    def codes(self) -> List[str]:
        return [entry.code for entry in self._entries]

    def entries(self) -> List[ErrorEntry]:
        return list(self._entries)

    def blocking(self) -> List[ErrorEntry]:
        return [entry for entry in self._entries if entry.blocking]

    def advisories(self) -> List[ErrorEntry]:
        return [entry for entry in self._entries if not entry.blocking]

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
