"""Custom exceptions for webprep."""

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from webprep.render.operations import OperationRequest


class WebprepError(Exception):
    """Base exception class for webprep."""

    pass


class ConversionError(WebprepError):
    """Error while converting a single source unit."""

    def __init__(self, file_path: Path, message: str, cause: Exception | None = None) -> None:
        self.file_path = file_path
        self.cause = cause
        super().__init__(f"Conversion failed for {file_path}: {message}")


class FileInfoParseError(ConversionError):
    """The rendering engine's identify report could not be parsed.

    Usually a symptom of an upstream operation failure that left no report.
    """

    def __init__(self, file_path: Path, report: str | None) -> None:
        self.report = report
        detail = "empty identify report" if not report else f"unparsable report: {report[:120]!r}"
        super().__init__(file_path, detail)


class OperationError(WebprepError):
    """An external operation exited non-zero or could not be spawned."""

    def __init__(
        self,
        request: "OperationRequest",
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        self.request = request
        self.returncode = returncode
        self.stderr = stderr
        status = f"exit code {returncode}" if returncode is not None else "spawn failure"
        super().__init__(f"{request.kind.value} failed ({status})")


class ManifestWriteError(WebprepError):
    """The run manifest could not be persisted."""

    def __init__(self, manifest_path: Path, cause: Exception | None = None) -> None:
        self.manifest_path = manifest_path
        self.cause = cause
        super().__init__(f"Failed to write manifest {manifest_path}: {cause}")


class ConfigurationError(WebprepError):
    """Configuration error."""

    pass
