"""Transform and format stages backed by external Node tools.

Each stage pipes the bundle through a command on stdin/stdout. A missing
executable, a non-zero exit or a timeout all surface as ``StageError``.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Sequence

from bundle_blitz.core.exceptions import StageError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class SubprocessStage:
    name = "external"

    def __init__(self, command: Sequence[str], timeout: float = DEFAULT_TIMEOUT) -> None:
        self._command = list(command)
        self._timeout = timeout

    @property
    def command(self) -> list[str]:
        return list(self._command)

    def available(self) -> bool:
        return shutil.which(self._command[0]) is not None

    async def apply(self, text: str) -> str:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self._command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise StageError(self.name, f"'{self._command[0]}' is not installed or not in PATH.") from None
        except OSError as exc:
            raise StageError(self.name, f"'{self._command[0]}' could not be started: {exc}") from None

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(text.encode("utf-8")), self._timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise StageError(self.name, f"'{self._command[0]}' timed out after {self._timeout:g}s.") from None

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip().splitlines()
            first_line = detail[0] if detail else f"exit code {proc.returncode}"
            raise StageError(self.name, first_line)

        logger.debug("Stage %s produced %d bytes", self.name, len(stdout))
        return stdout.decode("utf-8", errors="replace")


class EsbuildTransformStage(SubprocessStage):
    """Down-levels modern syntax and JSX with ``esbuild``."""

    name = "transform"

    def __init__(self, executable: str = "esbuild", target: str = "es2015", timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__([executable, "--loader=jsx", f"--target={target}"], timeout)


class PrettierFormatStage(SubprocessStage):
    name = "format"

    def __init__(self, executable: str = "prettier", timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__([executable, "--stdin-filepath", "bundle.js"], timeout)
