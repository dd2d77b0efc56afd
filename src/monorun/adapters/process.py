"""Child process execution: single commands and kill-others-on-exit groups."""

from __future__ import annotations

import asyncio
import os
import signal
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

DEFAULT_GRACE_PERIOD = 5.0
STREAM_LIMIT = 1024 * 1024
READ_CHUNK = 64 * 1024


class ProcessFailure(RuntimeError):
    """Raised when a child process exits non-zero or cannot be started."""

    def __init__(self, label: str, exit_code: int | None, reason: str | None = None) -> None:
        if exit_code is None:
            message = f"{label} could not be started: {reason or 'unknown error'}"
        elif exit_code < 0:
            message = f"{label} terminated by signal {-exit_code}"
        else:
            message = f"{label} exited with code {exit_code}"
        super().__init__(message)
        self.label = label
        self.exit_code = exit_code
        self.reason = reason


@dataclass(frozen=True)
class ProcessSpec:
    executable: str
    arguments: tuple[str, ...] = ()
    working_directory: Path | None = None
    label: str | None = None

    @property
    def display_label(self) -> str:
        return f"[{self.label}]" if self.label else self.executable

    def argv(self) -> list[str]:
        return [self.executable, *self.arguments]


@dataclass(frozen=True)
class MemberResult:
    label: str
    exit_code: int | None
    killed: bool = False


@dataclass(frozen=True)
class ProcessGroupOutcome:
    members: tuple[MemberResult, ...]
    failures: tuple[MemberResult, ...] = ()

    @property
    def succeeded(self) -> bool:
        return not self.failures

    @property
    def first_failure(self) -> MemberResult | None:
        return self.failures[0] if self.failures else None


class GroupMemberFailure(ProcessFailure):
    """Raised when a member of a concurrent group exits non-zero on its own."""

    def __init__(self, member: MemberResult, outcome: ProcessGroupOutcome) -> None:
        super().__init__(f"[{member.label}]", member.exit_code)
        self.member = member
        self.outcome = outcome


def _use_shell() -> bool:
    # .cmd/.bat shims (yarn, npx) only resolve through cmd.exe
    return os.name == "nt"


async def _spawn(spec: ProcessSpec, **kwargs) -> asyncio.subprocess.Process:
    cwd = str(spec.working_directory) if spec.working_directory is not None else None
    if _use_shell():
        return await asyncio.create_subprocess_shell(subprocess.list2cmdline(spec.argv()), cwd=cwd, **kwargs)
    return await asyncio.create_subprocess_exec(*spec.argv(), cwd=cwd, **kwargs)


async def run_process(spec: ProcessSpec) -> None:
    """Run ``spec`` with the terminal's streams and fail on a non-zero exit."""

    print(f"→ {spec.display_label} {' '.join(spec.arguments)}".strip(), flush=True)
    try:
        process = await _spawn(spec)
    except OSError as exc:
        raise ProcessFailure(spec.display_label, None, str(exc)) from exc
    exit_code = await process.wait()
    if exit_code != 0:
        raise ProcessFailure(spec.display_label, exit_code)


@dataclass(eq=False)
class _Member:
    spec: ProcessSpec
    process: asyncio.subprocess.Process
    pumps: list[asyncio.Task] = field(default_factory=list)
    killed: bool = False

    @property
    def label(self) -> str:
        return self.spec.label or self.spec.executable


async def _pump(stream: asyncio.StreamReader, label: str, *, to_stderr: bool) -> None:
    target = sys.stderr if to_stderr else sys.stdout
    pending = b""
    while True:
        chunk = await stream.read(READ_CHUNK)
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split(b"\n")
        # over-long lines are flushed in pieces so the pipe keeps draining
        if len(pending) >= STREAM_LIMIT:
            lines.append(pending)
            pending = b""
        for line in lines:
            _emit(target, label, line)
    if pending:
        _emit(target, label, pending)


def _emit(target, label: str, line: bytes) -> None:
    text = line.decode("utf-8", errors="replace").rstrip("\r")
    print(f"[{label}] {text}", file=target, flush=True)


def _signal(process: asyncio.subprocess.Process, sig: int) -> None:
    if os.name != "nt":
        try:
            os.killpg(process.pid, sig)
            return
        except ProcessLookupError:
            return
        except OSError:
            pass
    try:
        if sig == signal.SIGTERM:
            process.terminate()
        else:
            process.kill()
    except ProcessLookupError:
        return


async def _terminate(process: asyncio.subprocess.Process, grace_period: float) -> None:
    if process.returncode is not None:
        return
    _signal(process, signal.SIGTERM)
    try:
        await asyncio.wait_for(process.wait(), timeout=grace_period)
    except asyncio.TimeoutError:
        _signal(process, getattr(signal, "SIGKILL", signal.SIGTERM))
        await process.wait()


async def _start_member(spec: ProcessSpec) -> _Member:
    kwargs = {
        "stdin": asyncio.subprocess.DEVNULL,
        "stdout": asyncio.subprocess.PIPE,
        "stderr": asyncio.subprocess.PIPE,
        "limit": STREAM_LIMIT,
    }
    if os.name != "nt":
        kwargs["start_new_session"] = True
    try:
        process = await _spawn(spec, **kwargs)
    except OSError as exc:
        raise ProcessFailure(spec.display_label, None, str(exc)) from exc
    member = _Member(spec=spec, process=process)
    if process.stdout is not None:
        member.pumps.append(asyncio.create_task(_pump(process.stdout, member.label, to_stderr=False)))
    if process.stderr is not None:
        member.pumps.append(asyncio.create_task(_pump(process.stderr, member.label, to_stderr=True)))
    return member


async def _shutdown(members: Sequence[_Member], grace_period: float) -> None:
    running = [member for member in members if member.process.returncode is None]
    await asyncio.gather(*(_terminate(member.process, grace_period) for member in members))
    # a member that still reached exit 0 on its own was not stopped by us
    for member in running:
        member.killed = member.process.returncode != 0
    pumps = [task for member in members for task in member.pumps]
    if pumps:
        _, stuck = await asyncio.wait(pumps, timeout=grace_period)
        for task in stuck:
            task.cancel()
        await asyncio.gather(*pumps, return_exceptions=True)


async def run_group(
    specs: Sequence[ProcessSpec],
    *,
    grace_period: float = DEFAULT_GRACE_PERIOD,
) -> ProcessGroupOutcome:
    """Run ``specs`` concurrently; the first member to exit stops the others.

    Output of every member is prefixed with its label. Members stopped because
    a sibling exited do not count as failures. Raises
    :class:`GroupMemberFailure` for the first member whose own exit was
    non-zero.
    """

    members: list[_Member] = []
    first_exits: list[_Member] = []
    try:
        for spec in specs:
            members.append(await _start_member(spec))

        if members:
            waiters = {asyncio.ensure_future(member.process.wait()): member for member in members}
            done, pending = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
            first_exits = [member for task, member in waiters.items() if task in done]
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
    finally:
        await _shutdown(members, grace_period)

    results = {
        member: MemberResult(label=member.label, exit_code=member.process.returncode, killed=member.killed)
        for member in members
    }
    # members that exited first are reported ahead of late natural exits
    ordered = first_exits + [member for member in members if member not in first_exits]
    failures = tuple(
        results[member]
        for member in ordered
        if not member.killed and member.process.returncode != 0
    )
    outcome = ProcessGroupOutcome(members=tuple(results[member] for member in members), failures=failures)
    if outcome.first_failure is not None:
        raise GroupMemberFailure(outcome.first_failure, outcome)
    return outcome
