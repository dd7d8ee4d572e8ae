"""In-memory snapshot of the OS process table.

Listing processes is the one expensive probe shared by every target, so
the engine captures it once per scan and every target matches its own
regexes against the same snapshot. The snapshot is read-only after
capture.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from time import monotonic

import psutil

from agentradar.exceptions import ProbeExecutionError, ProbeTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessEntry:
    """One running process as seen at capture time.

    Attributes:
        pid: Process id.
        name: Executable name reported by the OS.
        command: Full command line joined with spaces, or ``name`` when the
            command line is unavailable (kernel threads, denied access).
    """

    pid: int
    name: str
    command: str

    @property
    def executable(self) -> str:
        """First token of the command line."""
        parts = self.command.split()
        return parts[0] if parts else self.name


class ProcessSnapshot:
    """Immutable list of processes captured at one instant."""

    def __init__(self, entries: Iterable[ProcessEntry]) -> None:
        self._entries: tuple[ProcessEntry, ...] = tuple(entries)

    def __iter__(self) -> Iterator[ProcessEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def capture(
        cls,
        timeout_ms: int,
        exclude_pids: Iterable[int] | None = None,
    ) -> ProcessSnapshot:
        """List running processes with ``psutil``.

        Processes that vanish or deny access mid-iteration are skipped.
        The calling process is always left out so that the discovery tool
        cannot detect itself.

        Args:
            timeout_ms: Deadline for the whole listing.
            exclude_pids: Extra PIDs to leave out.

        Raises:
            ProbeTimeoutError: If listing runs past ``timeout_ms``.
            ProbeExecutionError: If the platform refuses to list processes.
        """
        deadline = monotonic() + timeout_ms / 1000.0
        skipped = {os.getpid(), *(exclude_pids or ())}
        entries: list[ProcessEntry] = []
        try:
            for proc in psutil.process_iter(["pid", "name", "cmdline"]):
                if monotonic() > deadline:
                    raise ProbeTimeoutError(
                        f"Process scan exceeded {timeout_ms}ms"
                    )
                info = proc.info
                pid = info.get("pid")
                if pid is None or pid in skipped:
                    continue
                name = info.get("name") or ""
                cmdline = info.get("cmdline") or []
                command = " ".join(cmdline).strip() or name
                if not command:
                    continue
                entries.append(ProcessEntry(pid=pid, name=name, command=command))
        except (psutil.AccessDenied, PermissionError) as exc:
            raise ProbeExecutionError(f"Process listing denied: {exc}") from exc
        except psutil.Error as exc:
            raise ProbeExecutionError(f"Process listing failed: {exc}") from exc

        logger.debug("Captured %d processes", len(entries))
        return cls(entries)
