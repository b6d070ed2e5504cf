"""Command executor for the external rendering engine.

Every external operation passes through :class:`CommandExecutor`. A failed
operation is logged with its full command line and reported as ``None``, so
that one bad file can never abort a directory run.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Protocol

import anyio

from webprep.config.settings import RenderConfig
from webprep.exceptions import OperationError
from webprep.render.operations import OperationKind, OperationRequest
from webprep.utils.logging import get_logger

log = get_logger(__name__)


class Executor(Protocol):
    """Protocol for anything that can carry out an operation request."""

    async def run(self, request: OperationRequest) -> str | None:
        """Run the request, returning captured stdout or None on failure."""
        ...


class CommandExecutor:
    """Lowers operation requests to argv lists and runs them without a shell."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        """Initialize the executor.

        Args:
            config: Rendering engine commands and parameters
        """
        self.config = config or RenderConfig()

    def build_argv(self, request: OperationRequest) -> list[str]:
        """Lower a request to the argument vector of one process.

        Arguments are passed as separate list items, so filenames containing
        whitespace or quotes need no escaping.

        Raises:
            ValueError: If the request kind has no process form (COPY) or a
                required field is missing
        """
        cfg = self.config
        kind = request.kind

        if kind is OperationKind.IDENTIFY:
            return [*cfg.identify_command, str(_require(request.source, "source"))]

        if kind is OperationKind.RESIZE:
            argv = [*cfg.convert_command, "-flatten"]
            if request.geometry:
                argv += ["-resize", request.geometry]
            return argv + [
                str(_require(request.source, "source")),
                str(_require(request.destination, "destination")),
            ]

        if kind is OperationKind.EXTRACT_PAGES:
            directory = _require(request.directory, "directory")
            prefix = _require(request.prefix, "prefix")
            return [
                *cfg.convert_command,
                "-density",
                str(cfg.page_density),
                str(_require(request.source, "source")),
                str(directory / f"{prefix}-%d.png"),
            ]

        if kind is OperationKind.ASSEMBLE_ANIMATION:
            if not request.frames:
                raise ValueError("assemble_animation request has no frames")
            return [
                *cfg.convert_command,
                "-delay",
                str(cfg.animation_delay),
                "-loop",
                str(cfg.animation_loop),
                "-resize",
                f"{cfg.animation_width}x",
                *(str(frame) for frame in request.frames),
                str(_require(request.destination, "destination")),
            ]

        if kind is OperationKind.THUMBNAIL:
            return [
                *cfg.thumbnail_command,
                "-o",
                str(_require(request.destination, "destination")),
                str(_require(request.source, "source")),
            ]

        raise ValueError(f"{kind.value} is not a process operation")

    async def run(self, request: OperationRequest) -> str | None:
        """Execute one operation.

        Returns:
            Captured stdout on success (possibly empty), None on failure
        """
        try:
            if request.kind is OperationKind.COPY:
                log.debug("Executing operation", operation=request.describe())
                await anyio.to_thread.run_sync(self._copy, request)
                return ""

            argv = self.build_argv(request)
            log.debug("Executing operation", command=argv)
            return await anyio.to_thread.run_sync(self._run_process, request, argv)

        except OperationError as e:
            log.error(
                "Operation failed",
                operation=request.describe(),
                returncode=e.returncode,
                stderr=e.stderr,
            )
            return None
        except (OSError, ValueError) as e:
            log.error(
                "Operation failed",
                operation=request.describe(),
                error=str(e),
            )
            return None

    def _run_process(self, request: OperationRequest, argv: list[str]) -> str:
        try:
            completed = subprocess.run(argv, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            raise OperationError(request, returncode=e.returncode, stderr=e.stderr) from e
        except FileNotFoundError as e:
            raise OperationError(request, stderr=str(e)) from e
        return completed.stdout

    def _copy(self, request: OperationRequest) -> None:
        source = _require(request.source, "source")
        destination = _require(request.destination, "destination")
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)


def _require(value, name: str):
    if value is None:
        raise ValueError(f"operation request is missing '{name}'")
    return value
