"""
Client-side review session.

A session walks a shuffled copy of a deck's cards through

    question --flip--> answer --grade--> question (next card) | complete

Grades are recorded for display only. Nothing is persisted and the grade
value never changes the order or number of transitions; `again` and `easy`
behave identically.
"""
from __future__ import annotations

import asyncio
import logging
import random
from enum import Enum
from typing import Sequence

from flashy.config import settings
from flashy.models.card import Card

logger = logging.getLogger(__name__)


class ReviewState(str, Enum):
    QUESTION = "question"
    ANSWER = "answer"
    COMPLETE = "complete"


class Grade(str, Enum):
    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class InvalidTransition(Exception):
    """Raised when an action is not allowed in the session's current state."""


class ReviewSession:
    def __init__(
        self,
        cards: Sequence[Card],
        rng: random.Random | None = None,
        transition_delay: float | None = None,
    ) -> None:
        if not cards:
            raise ValueError("Cannot review a deck without cards")
        self._source: list[Card] = list(cards)
        self._rng = rng or random.Random()
        self.transition_delay = (
            settings.review_transition_delay
            if transition_delay is None
            else transition_delay
        )
        self._in_flight = False
        self.cards: list[Card] = []
        self.cursor = 0
        self.flipped = False
        self.graded: list[str] = []
        self.complete = False
        self.start()

    # --- State ---

    @property
    def state(self) -> ReviewState:
        if self.complete:
            return ReviewState.COMPLETE
        return ReviewState.ANSWER if self.flipped else ReviewState.QUESTION

    @property
    def current_card(self) -> Card | None:
        if self.complete:
            return None
        return self.cards[self.cursor]

    @property
    def total(self) -> int:
        return len(self.cards)

    @property
    def progress(self) -> int:
        """1-based position of the card on screen."""
        return min(self.cursor + 1, self.total)

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    # --- Transitions ---

    def start(self) -> None:
        shuffled = list(self._source)
        self._rng.shuffle(shuffled)
        self.cards = shuffled
        self.cursor = 0
        self.flipped = False
        self.graded = []
        self.complete = False

    def flip(self) -> None:
        if self.complete:
            raise InvalidTransition("Session is complete")
        self.flipped = True

    def grade(self, value: Grade | str) -> ReviewState:
        grade = Grade(value)
        if self._in_flight:
            raise InvalidTransition("A grade is already being applied")
        if self.state is not ReviewState.ANSWER:
            raise InvalidTransition(f"Cannot grade in state {self.state.value}")
        return self._apply_grade(grade)

    def _apply_grade(self, grade: Grade) -> ReviewState:
        card = self.cards[self.cursor]
        self.graded.append(card.id)
        logger.debug("Graded card %s as %s", card.id, grade.value)
        if self.cursor >= len(self.cards) - 1:
            self.complete = True
        else:
            self.cursor += 1
            self.flipped = False
        return self.state

    async def paced_grade(self, value: Grade | str) -> bool:
        """Grade after the transition delay. Input arriving mid-transition is dropped.

        Returns True if this call advanced the session.
        """
        if self._in_flight:
            return False
        grade = Grade(value)
        if self.state is not ReviewState.ANSWER:
            raise InvalidTransition(f"Cannot grade in state {self.state.value}")
        self._in_flight = True
        try:
            await asyncio.sleep(self.transition_delay)
            self._apply_grade(grade)
        finally:
            self._in_flight = False
        return True

    def restart(self) -> None:
        if not self.complete:
            raise InvalidTransition("Restart is only allowed once the session is complete")
        self.start()
