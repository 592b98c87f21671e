from dataclasses import dataclass, field
from typing import Any


class ClientInputError(Exception):
    """Rejected upload request (no files, too many, too large, bad type)."""


class TranscodeError(Exception):
    pass


class StorageError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class UploadedFile:
    data: bytes
    content_type: str
    original_filename: str

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class TranscodedImage:
    data: bytes
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class NamingOptions:
    public_id: str
    folder: str | None = None
    resource_type: str = "image"


@dataclass
class StoredImageDescriptor:
    url: str
    public_id: str
    size: int
    width: int
    height: int
    format: str
    original_filename: str


@dataclass
class ProcessingError:
    message: str
    original_filename: str


FileOutcome = StoredImageDescriptor | ProcessingError


@dataclass
class UploadBatchResult:
    images: list[StoredImageDescriptor] = field(default_factory=list)
    errors: list[ProcessingError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.images) + len(self.errors)

    def add(self, outcome: FileOutcome) -> None:
        if isinstance(outcome, ProcessingError):
            self.errors.append(outcome)
        else:
            self.images.append(outcome)


@dataclass
class DeletionResult:
    """Raw destroy response from the provider, e.g. {"result": "not found"}."""

    raw: dict[str, Any]

    @property
    def result(self) -> str | None:
        return self.raw.get("result")

    @property
    def found(self) -> bool:
        return self.result == "ok"
