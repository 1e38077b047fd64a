"""
ffmpeg media gateway

Wraps the ffmpeg executable behind a small interface:
- load(): locate and probe the binary, create the virtual filesystem
- write_file / read_file / unlink: files in the gateway's working directory
- run(*argv): one ffmpeg invocation with command-line grammar
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
import weakref
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import GatewayFailureError

logger = logging.getLogger(__name__)

STDERR_TAIL_CHARS = 2000


@dataclass
class _LoopLocks:
    load: asyncio.Lock = field(default_factory=asyncio.Lock)
    transcode: asyncio.Lock = field(default_factory=asyncio.Lock)


class FFmpegGateway:
    """
    Command-style transcoder with a private working directory.

    load() is idempotent: concurrent first callers all await a single setup.
    The working directory holds fixed-name slots shared by every call, so
    callers hold ``transcode_lock`` across write -> run -> read.

    Loaded state is process-wide. asyncio locks belong to one event loop, so
    each running loop gets its own pair.
    """

    def __init__(self, binary: str = "ffmpeg", workdir: Path | str | None = None):
        self.binary = binary
        self._workdir = Path(workdir) if workdir else None
        self._binary_path: str | None = None
        self._loaded = False
        self._locks: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, _LoopLocks] = weakref.WeakKeyDictionary()

    def _loop_locks(self) -> _LoopLocks:
        loop = asyncio.get_running_loop()
        locks = self._locks.get(loop)
        if locks is None:
            locks = self._locks[loop] = _LoopLocks()
        return locks

    @property
    def transcode_lock(self) -> asyncio.Lock:
        """Transcode lock for the running event loop."""
        return self._loop_locks().transcode

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def workdir(self) -> Path:
        if self._workdir is None:
            raise GatewayFailureError("ffmpeg gateway is not loaded")
        return self._workdir

    async def load(self) -> None:
        if self._loaded:
            return
        async with self._loop_locks().load:
            if self._loaded:
                return
            await self._setup()
            self._loaded = True

    async def _setup(self) -> None:
        binary_path = shutil.which(self.binary)
        if binary_path is None:
            raise GatewayFailureError(f"ffmpeg binary not found: {self.binary}")

        version = await self._probe(binary_path)
        logger.info(f"Loaded ffmpeg gateway: {version}")

        if self._workdir is None:
            self._workdir = Path(tempfile.mkdtemp(prefix="dataurl-converter-"))
        else:
            self._workdir.mkdir(parents=True, exist_ok=True)
        self._binary_path = binary_path
        logger.debug(f"ffmpeg virtual filesystem at {self._workdir}")

    async def _probe(self, binary_path: str) -> str:
        """Run ``ffmpeg -version`` and return its first line."""
        try:
            process = await asyncio.create_subprocess_exec(
                binary_path,
                "-version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise GatewayFailureError(f"Cannot execute {binary_path}: {e}") from e
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise GatewayFailureError(
                f"ffmpeg probe failed: {binary_path}",
                returncode=process.returncode,
                stderr=stderr.decode(errors="replace"),
            )
        lines = stdout.decode(errors="replace").splitlines()
        return lines[0] if lines else binary_path

    def _path(self, name: str) -> Path:
        if not name or name in (".", "..") or Path(name).name != name:
            raise ValueError(f"Invalid virtual file name: {name!r}")
        return self.workdir / name

    def write_file(self, name: str, data: bytes) -> None:
        self._path(name).write_bytes(data)
        logger.debug(f"Wrote {name} ({len(data)} bytes)")

    def read_file(self, name: str) -> bytes:
        try:
            return self._path(name).read_bytes()
        except FileNotFoundError as e:
            raise GatewayFailureError(f"ffmpeg produced no file named {name}") from e

    def unlink(self, name: str) -> None:
        self._path(name).unlink(missing_ok=True)

    async def run(self, *argv: str) -> None:
        """
        Run ffmpeg with the given arguments inside the virtual filesystem.

        Raises:
            GatewayFailureError: If not loaded or ffmpeg exits non-zero
        """
        if not self._loaded or self._binary_path is None:
            raise GatewayFailureError("ffmpeg gateway is not loaded")

        cmd = [self._binary_path, "-hide_banner", "-nostdin", "-y", *argv]
        logger.debug(f"Running {' '.join(cmd)}")
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(self.workdir),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await process.communicate()
        if process.returncode != 0:
            tail = stderr.decode(errors="replace")[-STDERR_TAIL_CHARS:]
            logger.warning(f"ffmpeg exited with {process.returncode}")
            raise GatewayFailureError(
                f"ffmpeg exited with code {process.returncode}",
                returncode=process.returncode,
                stderr=tail,
            )


_gateway: FFmpegGateway | None = None


def get_ffmpeg_gateway(binary: str = "ffmpeg") -> FFmpegGateway:
    """Return the process-wide gateway, creating it (unloaded) on first use."""
    global _gateway
    if _gateway is None:
        _gateway = FFmpegGateway(binary=binary)
    return _gateway


def reset_ffmpeg_gateway() -> None:
    """Forget the process-wide gateway."""
    global _gateway
    _gateway = None
