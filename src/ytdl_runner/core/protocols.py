"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure process runners must
satisfy.  Core code depends ONLY on these protocols — never on
concrete implementations — so tests can inject canned outcomes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Captured output of a child process that ran to completion."""

    stdout: bytes
    stderr: bytes
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


class ProcessRunner(Protocol):
    """Contract for blocking process execution backends."""

    def run(
        self,
        executable: str,
        args: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run *executable* with *args* and capture both streams.

        Implementations must drain stdout while waiting for the
        process, so arbitrarily large output never blocks the child.

        Raises
        ------
        ProcessSpawnError
            When the executable cannot be started.
        ProcessTimeoutError
            When *timeout* elapses first; the child is killed and no
            partial output is returned.
        IOFailureError
            When reading a stream fails.
        """
        ...  # pragma: no cover


class AsyncProcessRunner(Protocol):
    """Contract for asyncio process execution backends.

    Outcomes and exceptions are identical to :class:`ProcessRunner`.
    """

    async def run(
        self,
        executable: str,
        args: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> ProcessResult:
        ...  # pragma: no cover
