"""Pytest configuration and fixtures."""

import asyncio
import shutil
from pathlib import Path

import pytest

from webprep.config import WebprepSettings, get_settings
from webprep.render.operations import OperationKind, OperationRequest


def identify_report(name: str, fmt: str, width: int, height: int, layers: int = 1) -> str:
    """Build an identify report the way the rendering engine prints it."""
    geometry = f"{width}x{height}"
    if layers == 1:
        return f"{name} {fmt} {geometry} {geometry}+0+0 8-bit sRGB 1.2MB 0.000u 0:00.000\n"
    return "".join(
        f"{name}[{i}] {fmt} {geometry} {geometry}+0+0 16-bit sRGB 0.010u 0:00.009\n"
        for i in range(layers)
    )


class FakeExecutor:
    """Scripted stand-in for the rendering engine.

    Identify reports are looked up by source filename; a file with no
    scripted report gets ``None``, like a failed identify. Every other
    operation writes placeholder output where the real engine would.
    """

    def __init__(
        self,
        reports: dict[str, str] | None = None,
        pages: dict[str, int] | None = None,
        fail: set[OperationKind] | None = None,
    ) -> None:
        self.reports = reports or {}
        self.pages = pages or {}
        self.fail = fail or set()
        self.requests: list[OperationRequest] = []

    def of_kind(self, kind: OperationKind) -> list[OperationRequest]:
        return [r for r in self.requests if r.kind is kind]

    async def run(self, request: OperationRequest) -> str | None:
        self.requests.append(request)
        await asyncio.sleep(0)
        if request.kind in self.fail:
            return None

        kind = request.kind
        if kind is OperationKind.IDENTIFY:
            return self.reports.get(request.source.name)

        if kind is OperationKind.RESIZE:
            request.destination.write_bytes(b"variant")
        elif kind is OperationKind.EXTRACT_PAGES:
            for i in range(self.pages.get(request.source.name, 1)):
                (request.directory / f"{request.prefix}-{i}.png").write_bytes(b"page")
        elif kind is OperationKind.ASSEMBLE_ANIMATION:
            request.destination.write_bytes(b"GIF89a")
        elif kind is OperationKind.THUMBNAIL:
            (request.destination / f"{request.source.name}.png").write_bytes(b"thumb")
        elif kind is OperationKind.COPY:
            shutil.copy2(request.source, request.destination)
        return ""


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep settings and task logs away from the working directory."""
    monkeypatch.setenv("WEBPREP_LOG_DIR", str(tmp_path / ".logs"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> WebprepSettings:
    return WebprepSettings()


@pytest.fixture
def fake_executor_factory():
    """Build a FakeExecutor with scripted reports."""
    return FakeExecutor


@pytest.fixture
def report_for():
    """Build identify reports."""
    return identify_report


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """An empty source directory ``projects/spring`` inside tmp_path."""
    root = tmp_path / "projects" / "spring"
    root.mkdir(parents=True)
    return root
