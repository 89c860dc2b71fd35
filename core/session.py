"""
core/session.py — Session state for StatClash.

SessionState is an immutable snapshot of everything the player can see:
mode, difficulty, streaks and the current round. The controller is the
only code that builds new snapshots; the presentation layer just reads
them.

The snapshot is tagged by `mode`. Which optional fields are meaningful
depends on the mode, and __post_init__ rejects combinations that cannot
occur in a real session:

    IDLE     — no round, streak 0
    LOADING  — no round; `stalled` set when round loading gave up
    ACTIVE   — round present; prediction/outcome set once the player picks
    ENDED    — round present with an incorrect outcome; terminal

Usage:
    state = SessionState.initial(best_streak=4)
    state.mode                  # Mode.IDLE
    state.candidate_a           # None until a round is loaded
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum

from core.creature import CreatureRecord, total_score


class Mode(str, Enum):
    IDLE    = "idle"
    LOADING = "loading"
    ACTIVE  = "active"
    ENDED   = "ended"


class Difficulty(str, Enum):
    STANDARD    = "standard"
    CHALLENGING = "challenging"


class Selector(str, Enum):
    """Which of the two candidates the player picked."""
    A = "a"
    B = "b"


class Outcome(str, Enum):
    PREDICTED_CORRECTLY   = "predicted_correctly"
    PREDICTED_INCORRECTLY = "predicted_incorrectly"


def pick_winner(candidate_a: CreatureRecord, candidate_b: CreatureRecord) -> Selector:
    """Return the candidate with the higher total score.

    Equal totals resolve to A.
    """
    if total_score(candidate_a) >= total_score(candidate_b):
        return Selector.A
    return Selector.B


@dataclass(frozen=True)
class Round:
    """The two candidates of one round and what happened to them.

    Attributes:
        candidate_a:    First creature.
        candidate_b:    Second creature, always a different id.
        prediction:     The player's pick, None until submitted.
        outcome:        Result of the pick, set together with prediction.
        cooldown_ticks: Ticks left before the next round after a correct
                        pick. 0 means no cooldown.
    """

    candidate_a:    CreatureRecord
    candidate_b:    CreatureRecord
    prediction:     Selector | None = None
    outcome:        Outcome | None  = None
    cooldown_ticks: int             = 0

    def __post_init__(self) -> None:
        if self.candidate_a.id == self.candidate_b.id:
            raise ValueError(f"round candidates share id {self.candidate_a.id}")
        if (self.prediction is None) != (self.outcome is None):
            raise ValueError("prediction and outcome must be set together")
        if self.cooldown_ticks < 0:
            raise ValueError("cooldown_ticks cannot be negative")
        if self.cooldown_ticks > 0 and self.outcome is not Outcome.PREDICTED_CORRECTLY:
            raise ValueError("cooldown only follows a correct prediction")

    @property
    def winner(self) -> Selector:
        return pick_winner(self.candidate_a, self.candidate_b)

    def candidate(self, selector: Selector) -> CreatureRecord:
        return self.candidate_a if selector is Selector.A else self.candidate_b


@dataclass(frozen=True)
class SessionState:
    """Read-only snapshot of one game session.

    Attributes:
        mode:         Current lifecycle stage.
        difficulty:   Candidate selection policy for this session.
        streak:       Consecutive correct predictions.
        best_streak:  Highest streak ever recorded; never decreases.
        round:        Current round, present in ACTIVE and ENDED.
        stalled:      LOADING only. Round loading gave up; manual retry needed.
        final_streak: Streak reached before the last incorrect prediction.
        achievements: Ids of achievements unlocked in this process.
    """

    mode:         Mode
    difficulty:   Difficulty         = Difficulty.STANDARD
    streak:       int                = 0
    best_streak:  int                = 0
    round:        Round | None       = None
    stalled:      bool               = False
    final_streak: int                = 0
    achievements: tuple[str, ...]    = field(default=())

    def __post_init__(self) -> None:
        if self.streak < 0 or self.best_streak < 0:
            raise ValueError("streaks cannot be negative")
        if self.streak > self.best_streak:
            raise ValueError(f"streak {self.streak} exceeds best {self.best_streak}")
        has_round = self.round is not None
        if has_round != (self.mode in (Mode.ACTIVE, Mode.ENDED)):
            raise ValueError(f"round presence does not match mode {self.mode.value}")
        if self.stalled and self.mode is not Mode.LOADING:
            raise ValueError("only a loading session can be stalled")
        if self.mode is Mode.ENDED and self.round.outcome is not Outcome.PREDICTED_INCORRECTLY:
            raise ValueError("an ended session must carry an incorrect outcome")

    @classmethod
    def initial(cls, best_streak: int = 0) -> SessionState:
        return cls(mode=Mode.IDLE, best_streak=best_streak)

    def evolve(self, **changes) -> SessionState:
        """Return a copy with the given fields replaced and re-validated."""
        return replace(self, **changes)

    # ── Convenience reads ─────────────────────────────────────────────────────

    @property
    def candidate_a(self) -> CreatureRecord | None:
        return self.round.candidate_a if self.round else None

    @property
    def candidate_b(self) -> CreatureRecord | None:
        return self.round.candidate_b if self.round else None

    @property
    def user_prediction(self) -> Selector | None:
        return self.round.prediction if self.round else None

    @property
    def outcome(self) -> Outcome | None:
        return self.round.outcome if self.round else None

    @property
    def cooldown_ticks(self) -> int:
        return self.round.cooldown_ticks if self.round else 0

    @property
    def accepts_prediction(self) -> bool:
        """True if submit_prediction() would be honoured right now."""
        return (
            self.mode is Mode.ACTIVE
            and self.round is not None
            and self.round.prediction is None
            and self.round.cooldown_ticks == 0
        )
