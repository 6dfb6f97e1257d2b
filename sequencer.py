"""
Letter / Word Sequencer
- Drives which letter of the word is active
- Settles after each finished letter, then loads the next one
- Celebrates the finished word and hands control back to the menu

Timed transitions go through a Scheduler that the host ticks once per
frame. At most one transition is pending; scheduling a new one or
switching words cancels the old one so it can never fire on stale state.
"""

import enum
import logging
import random
import time
from typing import Callable, List, Optional, Sequence, Tuple

import config
from glyphs import GlyphDictionary
from stroke_engine import CheckResult, GuidanceMode, LetterSession, StrokeTracker

logger = logging.getLogger(__name__)


class SequencerState(str, enum.Enum):
    IDLE = "idle"
    LETTER_ACTIVE = "letter_active"
    LETTER_COMPLETE = "letter_complete"
    WORD_COMPLETE = "word_complete"


# ===============================
# Deferred transitions
# ===============================

class PendingTransition:
    """Handle for one scheduled callback. Cancelled handles never fire."""

    def __init__(self, due: float, callback: Callable[[], None], label: str = ""):
        self.due = due
        self.callback = callback
        self.label = label
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self):
        self.cancelled = True

    def __repr__(self):
        return f"PendingTransition({self.label!r}, due={self.due:.3f}, active={self.active})"


class Scheduler:
    """One-shot deferred callbacks, fired from the host loop via tick()."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._pending: List[PendingTransition] = []

    def now(self) -> float:
        return self.clock()

    def schedule(self, delay: float, callback: Callable[[], None],
                 label: str = "") -> PendingTransition:
        transition = PendingTransition(self.clock() + max(0.0, delay), callback, label)
        self._pending.append(transition)
        return transition

    def tick(self, now: Optional[float] = None) -> int:
        """Fire every due transition in due order. Returns how many fired."""
        if now is None:
            now = self.clock()
        fired = 0
        while True:
            self._pending = [t for t in self._pending if t.active]
            due = [t for t in self._pending if t.due <= now]
            if not due:
                return fired
            transition = min(due, key=lambda t: t.due)
            transition.fired = True
            self._pending.remove(transition)
            transition.callback()
            fired += 1

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self._pending if t.active)


# ===============================
# Audio collaborator
# ===============================

class ConsoleNarrator:
    """
    Stand-in audio collaborator that only logs.
    speak() reports speech as unavailable so callers use their fallback delay.
    """

    def play_letter_audio(self, char: str):
        logger.info("Letter audio: %s", char.upper())

    def speak(self, text: str, on_done: Callable[[], None]) -> bool:
        logger.info("Narration unavailable, would say: %s", text)
        return False


# ===============================
# Sequencer
# ===============================

class WordSequencer:
    """State machine: IDLE -> LETTER_ACTIVE -> LETTER_COMPLETE -> ... -> WORD_COMPLETE -> IDLE."""

    def __init__(
        self,
        glyphs: GlyphDictionary,
        tracker: StrokeTracker,
        scheduler: Optional[Scheduler] = None,
        audio=None,
        narrator=None,
        openings: Optional[Sequence[str]] = None,
        closings: Optional[Sequence[str]] = None,
        rng: Optional[random.Random] = None,
        on_celebrate: Optional[Callable[[], None]] = None,
        on_return_to_menu: Optional[Callable[[], None]] = None,
        guidance_mode=config.DEFAULT_GUIDANCE_MODE,
    ):
        self.glyphs = glyphs
        self.tracker = tracker
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.audio = audio
        self.narrator = narrator
        self.openings = list(openings) if openings else list(config.DEFAULT_OPENINGS)
        self.closings = list(closings) if closings else list(config.DEFAULT_CLOSINGS)
        self.rng = rng if rng is not None else random.Random()
        self.on_celebrate = on_celebrate
        self.on_return_to_menu = on_return_to_menu
        self.guidance_mode = guidance_mode

        self.state = SequencerState.IDLE
        self.word = ""
        self.letter_index = 0
        self.last_word = ""
        self.message: Optional[str] = None
        self.return_to_menu = False
        self._pending: Optional[PendingTransition] = None

    # ----------------------------
    # Properties
    # ----------------------------

    @property
    def guidance_mode(self) -> GuidanceMode:
        return self._guidance_mode

    @guidance_mode.setter
    def guidance_mode(self, value):
        self._guidance_mode = GuidanceMode.parse(value)

    @property
    def session(self) -> Optional[LetterSession]:
        return self.tracker.session

    @property
    def current_char(self) -> Optional[str]:
        if 0 <= self.letter_index < len(self.word):
            return self.word[self.letter_index]
        return None

    @property
    def pending(self) -> Optional[PendingTransition]:
        if self._pending is not None and self._pending.active:
            return self._pending
        return None

    # ----------------------------
    # Word / letter flow
    # ----------------------------

    def start_word(self, word: str) -> bool:
        word = str(word)
        if not word:
            logger.warning("Ignoring empty word")
            return False

        self._cancel_pending()
        self.tracker.clear()
        self.word = word
        self.last_word = word
        self.letter_index = 0
        self.message = None
        self.return_to_menu = False
        logger.info("Starting word %r", word)
        self._advance_from_current()
        return True

    def load_letter(self, char: str) -> bool:
        """Load a letter of the active word; a character with no glyph is skipped as already done."""
        if not self.word:
            logger.warning("No word active, ignoring letter %r", char)
            return False
        if self._try_load(char):
            return True
        self._next_letter()
        return False

    def _next_letter(self):
        self._cancel_pending()
        self.letter_index += 1
        self._advance_from_current()

    def restart_letter(self):
        """Clear traced progress of the active letter."""
        if self.state is SequencerState.LETTER_ACTIVE:
            self.tracker.reset()

    def abandon(self):
        """Leave the current word (menu or word switch)."""
        self._cancel_pending()
        self.tracker.clear()
        self.word = ""
        self.letter_index = 0
        self.message = None
        self.state = SequencerState.IDLE

    def handle_point(self, position: Tuple[float, float]) -> CheckResult:
        """Input sampler sink: check one pixel position against the letter."""
        if self.state is not SequencerState.LETTER_ACTIVE:
            return CheckResult(False, False)
        result = self.tracker.check_point(position, self.guidance_mode)
        if result.letter_complete:
            self._complete_letter()
        return result

    def celebration_message(self) -> str:
        opening = self.rng.choice(self.openings)
        closing = self.rng.choice(self.closings)
        return f"{opening}. The word is {self.word}. {closing}"

    def _try_load(self, char: str) -> bool:
        self._cancel_pending()
        strokes = self.glyphs.strokes_for(char)
        if not strokes:
            logger.info("No glyph for %r, skipping", char)
            return False
        self.tracker.load(strokes)
        self.state = SequencerState.LETTER_ACTIVE
        logger.debug("Loaded %r with %d strokes", char, len(strokes))
        return True

    def _advance_from_current(self):
        while self.letter_index < len(self.word):
            if self._try_load(self.word[self.letter_index]):
                return
            self.letter_index += 1
        self._complete_word()

    def _complete_letter(self):
        char = self.current_char
        self.state = SequencerState.LETTER_COMPLETE
        logger.info("Letter %r complete (%d/%d)", char, self.letter_index + 1, len(self.word))
        if self.audio is not None and char is not None:
            self._call("play_letter_audio", self.audio.play_letter_audio, char)
        self._schedule(config.SETTLE_DELAY_SECONDS, self._next_letter, "next_letter")

    def _complete_word(self):
        self.state = SequencerState.WORD_COMPLETE
        self.tracker.clear()
        self.message = self.celebration_message()
        logger.info("Word %r complete: %s", self.word, self.message)
        if self.on_celebrate is not None:
            self._call("on_celebrate", self.on_celebrate)

        accepted = False
        if self.narrator is not None:
            timeout = self._schedule(config.NARRATION_TIMEOUT_SECONDS,
                                     self._finish_word, "narration_timeout")
            accepted = self._call("speak", self.narrator.speak, self.message,
                                  lambda: self._narration_done(timeout))
        if not accepted:
            self._schedule(config.WORD_FALLBACK_SECONDS, self._finish_word, "word_fallback")

    def _narration_done(self, token: PendingTransition):
        if self._pending is not token:
            return
        self._schedule(config.NARRATION_TAIL_SECONDS, self._finish_word, "narration_tail")

    def _finish_word(self):
        logger.info("Returning to menu after %r", self.word)
        self.tracker.clear()
        self.word = ""
        self.letter_index = 0
        self.state = SequencerState.IDLE
        self.return_to_menu = True
        if self.on_return_to_menu is not None:
            self._call("on_return_to_menu", self.on_return_to_menu)

    # ----------------------------
    # Pending transition
    # ----------------------------

    def _schedule(self, delay: float, callback: Callable[[], None],
                  label: str) -> PendingTransition:
        self._cancel_pending()
        token = None

        def fire():
            if self._pending is not token:
                return
            self._pending = None
            callback()

        token = self.scheduler.schedule(delay, fire, label)
        self._pending = token
        return token

    def _cancel_pending(self):
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _call(self, name: str, fn: Callable, *args):
        try:
            return fn(*args)
        except Exception:
            logger.exception("%s failed", name)
            return None
