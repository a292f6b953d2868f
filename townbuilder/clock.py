"""Game clock with pause-aware elapsed time accounting.

All timestamps are milliseconds from whatever clock the orchestrator was given.
Elapsed time never advances while the clock is paused; when play resumes the
start timestamp is shifted forward by the pause duration so ``elapsed`` stays
continuous.
"""

from typing import Optional

from pydantic import BaseModel, Field


class GameClock(BaseModel):
    """Start/current timestamps plus pause bookkeeping."""

    start_time: float = 0.0
    current_time: float = 0.0
    elapsed: float = Field(0.0, description="Milliseconds of unpaused play")
    is_paused: bool = False
    paused_at: Optional[float] = Field(
        None, description="Timestamp the current pause began, None when running"
    )

    def start(self, now: float) -> None:
        self.start_time = now
        self.current_time = now
        self.elapsed = 0.0
        self.is_paused = False
        self.paused_at = None

    def pause(self, now: float) -> None:
        self.is_paused = True
        if self.paused_at is None:
            self.paused_at = now

    def resume(self, now: Optional[float] = None) -> None:
        """Clear the paused flag.

        With ``now`` the pause is closed immediately; otherwise the start shift
        happens on the next advance().
        """
        self.is_paused = False
        if now is not None and self.paused_at is not None:
            self.start_time += now - self.paused_at
            self.paused_at = None

    def advance(self, now: float) -> None:
        """Bring the clock up to ``now``.

        While paused only the pause start is recorded (on first detection). After
        a pause ends the start time absorbs the whole pause before elapsed is
        recomputed.
        """
        if self.is_paused:
            if self.paused_at is None:
                self.paused_at = now
            return

        if self.paused_at is not None:
            self.start_time += now - self.paused_at
            self.paused_at = None

        self.current_time = now
        self.elapsed = now - self.start_time

    def rebase(self, now: float) -> None:
        """Re-anchor a restored clock at ``now`` keeping its elapsed time.

        Used after loading a snapshot so time spent outside the session is not
        counted as play time.
        """
        self.start_time = now - self.elapsed
        self.current_time = now
        self.paused_at = now if self.is_paused else None

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed / 1000

    def formatted(self) -> str:
        """Elapsed time as ``MM:SS``."""
        total_seconds = int(self.elapsed // 1000)
        minutes, seconds = divmod(total_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"
