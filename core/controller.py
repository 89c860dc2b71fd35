"""
core/controller.py — Game session controller for StatClash.

GameController owns the SessionState and is the only code that changes
it. The presentation layer reads `controller.state` and calls the public
operations below; nothing else mutates session data.

Operations:
    start_session(difficulty) — new session, schedules the first round
    load_round()              — fetch two candidates (async, retried)
    submit_prediction(sel)    — judge a pick, update streaks
    tick_cooldown()           — advance the post-win cooldown by one tick
    reset_to_start()          — back to IDLE, best streak kept

Transitions:
    IDLE    → LOADING : start_session
    LOADING → ACTIVE  : load_round succeeds
    LOADING → LOADING : load_round gives up (stalled, manual retry)
    ACTIVE  → ACTIVE  : correct pick; next round loads after the cooldown
    ACTIVE  → ENDED   : incorrect pick
    any     → IDLE    : reset_to_start

All operations must run on the asyncio event loop thread. Fetches are the
only suspension points. A generation counter guards against stale work:
reset_to_start() and start_session() cancel the pending post-cooldown
reload and any round load still in flight is discarded when it returns.

Usage:
    controller = GameController(lookup, store)
    await controller.start_session(Difficulty.STANDARD)
    controller.submit_prediction(Selector.A)
"""

from __future__ import annotations
import asyncio
import logging
import random
from dataclasses import replace

from core.achievements import newly_unlocked
from core.creature import CreatureRecord, total_score
from core.errors import FetchError
from core.lookup import CreatureLookup, random_creature_id
from core.session import Difficulty, Mode, Outcome, Round, Selector, SessionState
from core.storage import KeyValueStore, load_best_streak, save_best_streak
from settings import (
    COOLDOWN_SECONDS,
    COOLDOWN_TICKS,
    ROUND_LOAD_ATTEMPTS,
    SIMILARITY_ATTEMPTS,
    SIMILARITY_TOLERANCE,
)

logger = logging.getLogger(__name__)


class GameController:
    """Drives one player's sessions through the game state machine.

    Attributes:
        _lookup:           Creature lookup service (usually a CachedLookup).
        _store:            Key-value store holding the best streak.
        _rng:              Random source for creature identifiers.
        _cooldown_seconds: Delay between a correct pick and the next round.
        _state:            Current SessionState snapshot.
        _generation:       Bumped by every reset, new session and round load.
                           Async work captures it and gives up on mismatch.
        _reload_handle:    Pending post-cooldown reload, or None.
        _load_task:        Most recent round-load task, or None.
    """

    def __init__(
        self,
        lookup: CreatureLookup,
        store: KeyValueStore,
        rng: random.Random | None = None,
        cooldown_seconds: float = COOLDOWN_SECONDS,
    ) -> None:
        self._lookup = lookup
        self._store = store
        self._rng = rng or random.Random()
        self._cooldown_seconds = cooldown_seconds
        self._state = SessionState.initial(best_streak=load_best_streak(store))
        self._generation = 0
        self._reload_handle: asyncio.TimerHandle | None = None
        self._load_task: asyncio.Task | None = None

    @property
    def state(self) -> SessionState:
        """Current read-only snapshot."""
        return self._state

    def snapshot(self) -> SessionState:
        """Return the current snapshot; same object as `state`."""
        return self._state

    # ── Session lifecycle ─────────────────────────────────────────────────────

    def start_session(self, difficulty: Difficulty) -> asyncio.Task:
        """Begin a new session and schedule its first round.

        Works from any mode. A pending reload from a previous session is
        cancelled first.

        Args:
            difficulty: Candidate selection policy, fixed for the session.

        Returns:
            The task running load_round(). Awaiting it is optional.
        """
        difficulty = Difficulty(difficulty)
        self._cancel_pending()
        self._generation += 1
        self._state = SessionState(
            mode=Mode.LOADING,
            difficulty=difficulty,
            best_streak=self._state.best_streak,
            achievements=self._state.achievements,
        )
        logger.info("Session started (%s)", difficulty.value)
        return self._spawn_load()

    def reset_to_start(self) -> None:
        """Return to IDLE from any mode. The best streak is kept."""
        self._cancel_pending()
        self._generation += 1
        self._state = SessionState(
            mode=Mode.IDLE,
            difficulty=self._state.difficulty,
            best_streak=self._state.best_streak,
            achievements=self._state.achievements,
        )
        logger.debug("Session reset")

    def close(self) -> None:
        """Cancel timers and in-flight loads. Call on shutdown."""
        self._cancel_pending()
        self._generation += 1
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
        self._load_task = None

    # ── Round loading ─────────────────────────────────────────────────────────

    async def load_round(self) -> bool:
        """Fetch two candidates and make the session ACTIVE.

        The whole round is attempted up to ROUND_LOAD_ATTEMPTS times; a
        FetchError anywhere in an attempt throws that attempt away. When
        all attempts fail the session stays LOADING with `stalled` set and
        nothing retries automatically. Calling load_round() again is the
        manual retry.

        Returns:
            True if a round was loaded. False if loading stalled, the call
            was not valid in the current mode, or the session was reset
            while fetching.
        """
        if self._state.mode not in (Mode.LOADING, Mode.ACTIVE):
            logger.debug("load_round ignored in mode %s", self._state.mode.value)
            return False

        self._generation += 1
        generation = self._generation
        difficulty = self._state.difficulty
        self._state = self._state.evolve(mode=Mode.LOADING, round=None, stalled=False)

        for attempt in range(1, ROUND_LOAD_ATTEMPTS + 1):
            try:
                candidate_a, candidate_b = await self._draw_candidates(difficulty)
            except FetchError as exc:
                if generation != self._generation:
                    return False
                logger.info(
                    "Round load attempt %d/%d failed: %s",
                    attempt, ROUND_LOAD_ATTEMPTS, exc,
                )
                continue

            if generation != self._generation:
                logger.debug("Discarding round fetched for a stale session")
                return False

            self._state = self._state.evolve(
                mode=Mode.ACTIVE,
                round=Round(candidate_a=candidate_a, candidate_b=candidate_b),
            )
            logger.debug(
                "Round ready: %s (%d) vs %s (%d)",
                candidate_a.name, total_score(candidate_a),
                candidate_b.name, total_score(candidate_b),
            )
            return True

        if generation == self._generation:
            self._state = self._state.evolve(stalled=True)
            logger.warning("Round load gave up after %d attempts", ROUND_LOAD_ATTEMPTS)
        return False

    async def _draw_candidates(
        self, difficulty: Difficulty
    ) -> tuple[CreatureRecord, CreatureRecord]:
        """Pick the two candidates of a round.

        The second fetch starts after the first resolves because the
        challenging policy compares against the first candidate's total.

        Raises:
            FetchError: Propagated from the lookup service.
        """
        first = await self._lookup.fetch_creature(random_creature_id(self._rng))

        if difficulty is Difficulty.STANDARD:
            second = await self._lookup.fetch_creature(
                random_creature_id(self._rng, exclude=first.id)
            )
            return first, second

        target = total_score(first)
        second = None
        for _ in range(SIMILARITY_ATTEMPTS):
            second = await self._lookup.fetch_creature(
                random_creature_id(self._rng, exclude=first.id)
            )
            if abs(total_score(second) - target) <= SIMILARITY_TOLERANCE:
                return first, second

        # No close match within the bound: keep the last sample anyway.
        logger.info(
            "No candidate within %d of %d after %d samples, using %s",
            SIMILARITY_TOLERANCE, target, SIMILARITY_ATTEMPTS, second.name,
        )
        return first, second

    # ── Predictions ───────────────────────────────────────────────────────────

    def submit_prediction(self, selector: Selector) -> Outcome | None:
        """Judge the player's pick for the current round.

        Ignored unless the session is ACTIVE, no pick has been made this
        round and no cooldown is running.

        A correct pick bumps the streak, persists a new best streak,
        unlocks achievements and schedules the next round after the
        cooldown. An incorrect pick ends the session.

        Args:
            selector: Selector.A or Selector.B.

        Returns:
            The Outcome, or None if the call was ignored.
        """
        state = self._state
        if not state.accepts_prediction:
            logger.debug("Prediction ignored in mode %s", state.mode.value)
            return None

        selector = Selector(selector)
        current = state.round

        if selector is current.winner:
            streak = state.streak + 1
            best = state.best_streak
            if streak > best:
                best = streak
                save_best_streak(self._store, best)
            unlocked = newly_unlocked(streak, state.achievements)
            for achievement in unlocked:
                logger.info("Achievement unlocked: %s", achievement.name)
            self._state = state.evolve(
                streak=streak,
                best_streak=best,
                round=replace(
                    current,
                    prediction=selector,
                    outcome=Outcome.PREDICTED_CORRECTLY,
                    cooldown_ticks=COOLDOWN_TICKS,
                ),
                achievements=state.achievements + tuple(a.id for a in unlocked),
            )
            self._schedule_reload()
            return Outcome.PREDICTED_CORRECTLY

        logger.info("Session ended with streak %d", state.streak)
        self._state = state.evolve(
            mode=Mode.ENDED,
            streak=0,
            final_streak=state.streak,
            round=replace(
                current,
                prediction=selector,
                outcome=Outcome.PREDICTED_INCORRECTLY,
            ),
        )
        return Outcome.PREDICTED_INCORRECTLY

    def tick_cooldown(self) -> int:
        """Advance the cooldown by one tick.

        Returns:
            Ticks remaining. Never negative; a no-op when already 0.
        """
        current = self._state.round
        if current is None or current.cooldown_ticks == 0:
            return 0
        remaining = current.cooldown_ticks - 1
        self._state = self._state.evolve(round=replace(current, cooldown_ticks=remaining))
        return remaining

    # ── Deferred work ─────────────────────────────────────────────────────────

    def _spawn_load(self) -> asyncio.Task:
        """Start load_round() as a task and remember it for close()."""
        self._load_task = asyncio.get_running_loop().create_task(self.load_round())
        return self._load_task

    def _schedule_reload(self) -> None:
        """Arm the post-cooldown reload for the current generation."""
        self._cancel_pending()
        loop = asyncio.get_running_loop()
        self._reload_handle = loop.call_later(
            self._cooldown_seconds, self._deferred_reload, self._generation
        )

    def _deferred_reload(self, generation: int) -> None:
        """Timer callback: load the next round unless the session moved on."""
        self._reload_handle = None
        if generation != self._generation:
            return
        self._spawn_load()

    def _cancel_pending(self) -> None:
        """Drop the pending post-cooldown reload, if any."""
        if self._reload_handle is not None:
            self._reload_handle.cancel()
            self._reload_handle = None

    @property
    def reload_pending(self) -> bool:
        """True while a post-cooldown reload is scheduled."""
        return self._reload_handle is not None
