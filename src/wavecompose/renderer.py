"""External renderer handle — a lazily bootstrapped ffmpeg with working storage.

The handle locates the ffmpeg binary bundled with imageio-ffmpeg, checks
that it runs, and creates a private working directory. Inputs are
written into that directory under fixed names, ffmpeg runs with it as
the current directory, and the output is read back as bytes.

Bootstrap happens once per handle and is idempotent; a failed bootstrap
leaves the handle unloaded so the next call retries. One handle is
shared per process through shared_renderer(); it is never torn down.
"""

import functools
import shutil
import subprocess
import tempfile
from pathlib import Path

import imageio_ffmpeg
from moviepy import AudioFileClip


LOG_NAME = "ffmpeg.log"
LOG_TAIL_LINES = 20


class FFmpegRenderer:
    """ffmpeg executable + working directory, loaded on first use."""

    def __init__(self):
        self.exe = None
        self.work_dir = None

    @property
    def loaded(self) -> bool:
        return self.exe is not None

    def load(self) -> "FFmpegRenderer":
        """Bootstrap the renderer. Repeated calls once loaded are no-ops.

        Raises:
            RuntimeError: imageio-ffmpeg cannot provide a binary.
            subprocess.CalledProcessError: The binary does not run.
        """
        if self.loaded:
            return self
        exe = imageio_ffmpeg.get_ffmpeg_exe()
        subprocess.run([exe, "-hide_banner", "-version"], check=True, capture_output=True)
        self.work_dir = Path(tempfile.mkdtemp(prefix="wavecompose-"))
        self.exe = exe
        return self

    # ── Working storage ──────────────────────────────────────────

    def _path(self, name: str) -> Path:
        if not self.loaded:
            raise RuntimeError("Renderer is not loaded")
        return self.work_dir / name

    def write_file(self, name: str, data: bytes) -> str:
        self._path(name).write_bytes(data)
        return name

    def read_file(self, name: str) -> bytes:
        return self._path(name).read_bytes()

    def delete_file(self, name: str) -> None:
        self._path(name).unlink(missing_ok=True)

    def clear(self) -> None:
        """Remove every file from working storage, keeping the handle."""
        for entry in self._path(".").iterdir():
            if entry.is_dir():
                shutil.rmtree(entry)
            else:
                entry.unlink()

    def probe_duration(self, name: str) -> float:
        """Duration in seconds of a staged audio file."""
        with AudioFileClip(str(self._path(name))) as clip:
            return clip.duration

    # ── Execution ────────────────────────────────────────────────

    def _log_tail(self) -> str:
        log = self._path(LOG_NAME)
        if not log.exists():
            return ""
        lines = log.read_text(errors="replace").strip().splitlines()
        return "\n".join(lines[-LOG_TAIL_LINES:])

    def exec(self, args: list[str], on_progress=None, duration: float | None = None) -> None:
        """Run ffmpeg with args inside the working directory.

        Progress is read from ffmpeg's machine-readable -progress stream
        on stdout. When duration is known, each out_time_us sample is
        reported to on_progress as a fraction of it; progress=end
        reports 1.0.

        Raises:
            RuntimeError: ffmpeg exited non-zero (message carries the
                tail of its log).
        """
        cmd = [
            self.exe, "-y", "-nostdin", "-hide_banner",
            "-loglevel", "error", "-nostats",
            "-progress", "pipe:1",
            *args,
        ]
        with open(self._path(LOG_NAME), "wb") as log:
            proc = subprocess.Popen(
                cmd, cwd=self.work_dir,
                stdout=subprocess.PIPE, stderr=log,
                text=True,
            )
            try:
                for raw_line in proc.stdout:
                    line = raw_line.strip()
                    if on_progress is None:
                        continue
                    if line.startswith("out_time_us=") and duration:
                        value = line.split("=", 1)[1]
                        if value.lstrip("-").isdigit():
                            on_progress(min(1.0, max(0.0, int(value) / (duration * 1_000_000))))
                    elif line == "progress=end":
                        on_progress(1.0)
                returncode = proc.wait()
            except BaseException:
                # Leave no orphaned ffmpeg behind; the handle stays usable.
                proc.kill()
                proc.wait()
                raise
            finally:
                proc.stdout.close()

        if returncode != 0:
            raise RuntimeError(
                f"ffmpeg exited with code {returncode}: {self._log_tail()}"
            )


@functools.lru_cache(maxsize=None)
def shared_renderer() -> FFmpegRenderer:
    """The process-wide renderer handle (created unloaded, loaded on use)."""
    return FFmpegRenderer()
