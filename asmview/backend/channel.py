"""Request/response channels to the radare2 analysis backend.

A request is an ordered command script plus the target binary; the response
is ``{output, error?}``. ``Radare2Channel`` runs radare2 directly as a
subprocess; ``HttpBackendChannel`` talks to the small proxy service that
does the same thing over ``POST /radare2``.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import requests

from ..errors import BackendReportedError, BackendUnavailable

logger = logging.getLogger(__name__)

DEFAULT_RADARE2_EXECUTABLE = "radare2"
DEFAULT_BACKEND_URL = "http://localhost:8080/radare2"


@dataclass(frozen=True)
class CommandScript:
    """Named, ordered list of radare2 commands run in one backend request."""

    name: str
    commands: tuple[str, ...]

    def params(self) -> list[str]:
        return ["-qc", ";".join(self.commands)]


@dataclass(frozen=True)
class BackendResponse:
    output: str
    error: str | None = None


class BackendChannel(Protocol):
    def run(self, script: CommandScript, binary_path: Path) -> BackendResponse: ...


class Radare2Channel:
    """Run each script in a fresh ``radare2 -qc`` process."""

    def __init__(self, executable: str = DEFAULT_RADARE2_EXECUTABLE) -> None:
        self.executable = executable

    def run(self, script: CommandScript, binary_path: Path) -> BackendResponse:
        cmd = [self.executable, *script.params(), str(Path(binary_path).resolve())]
        logger.debug("running radare2 script %s: %s", script.name, cmd)
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise BackendUnavailable(f"failed to run {self.executable}: {exc}") from exc

        output = proc.stdout or ""
        if proc.returncode != 0:
            logger.warning("radare2 script %s exited with status %d", script.name, proc.returncode)
            return BackendResponse(output=output, error=f"radare2 error: exit status {proc.returncode}")
        return BackendResponse(output=output)


class HttpBackendChannel:
    """POST scripts to a radare2 proxy service."""

    def __init__(
        self,
        url: str = DEFAULT_BACKEND_URL,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def run(self, script: CommandScript, binary_path: Path) -> BackendResponse:
        payload = {"filepath": str(Path(binary_path).resolve()), "params": script.params()}
        logger.debug("posting radare2 script %s to %s", script.name, self.url)
        try:
            response = self._session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise BackendUnavailable(f"backend request failed: {exc}") from exc
        except ValueError as exc:
            raise BackendUnavailable(f"backend returned invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise BackendUnavailable("backend returned an unexpected payload")
        output = data.get("output")
        error = data.get("error")
        return BackendResponse(
            output=output if isinstance(output, str) else "",
            error=error if isinstance(error, str) and error else None,
        )


def request_output(channel: BackendChannel, script: CommandScript, binary_path: Path) -> str:
    """Run ``script`` and return its output, raising when the backend reports an error."""
    response = channel.run(script, binary_path)
    if response.error:
        raise BackendReportedError(response.error)
    return response.output
