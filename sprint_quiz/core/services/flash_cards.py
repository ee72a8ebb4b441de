"""Flash-card study mode: a non-scored, reshuffleable walk through the catalog."""

from __future__ import annotations

from typing import Sequence

from sprint_quiz.core.models import Question
from sprint_quiz.core.shuffler import Shuffler

STUDY_MODE_ALL = "all"
STUDY_MODE_BY_COMPETENCY = "by-competency"


class FlashCardDeck:
    """Deck over the catalog with flip, step and reshuffle controls."""

    def __init__(self, catalog: Sequence[Question], shuffler: Shuffler | None = None) -> None:
        self._catalog = list(catalog)
        self._shuffler = shuffler or Shuffler()
        self._cards: list[Question] = []
        self._index: int = 0
        self._flipped: bool = False
        self.study_mode: str = STUDY_MODE_ALL
        self.competency: str | None = None
        self.load()

    def competencies(self) -> list[str]:
        return sorted({q.competency for q in self._catalog if q.competency})

    def load(self, study_mode: str = STUDY_MODE_ALL, competency: str | None = None) -> None:
        """Rebuild the deck for a study mode; by-competency without a choice uses every card."""
        if study_mode not in (STUDY_MODE_ALL, STUDY_MODE_BY_COMPETENCY):
            raise ValueError(f"Unknown study mode: {study_mode}")
        self.study_mode = study_mode
        self.competency = competency or None
        cards = self._catalog
        if study_mode == STUDY_MODE_BY_COMPETENCY and self.competency:
            cards = [q for q in self._catalog if q.competency == self.competency]
        self._cards = self._shuffler.shuffle(cards)
        self._reset_position()

    @property
    def cards(self) -> list[Question]:
        return list(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def get_current_card(self) -> Question | None:
        if not self._cards:
            return None
        return self._cards[self._index]

    def get_current_index(self) -> int:
        return self._index

    def is_flipped(self) -> bool:
        return self._flipped

    def flip(self) -> bool:
        self._flipped = not self._flipped
        return self._flipped

    def next_card(self) -> Question | None:
        if self._index < len(self._cards) - 1:
            self._index += 1
            self._flipped = False
        return self.get_current_card()

    def previous_card(self) -> Question | None:
        if self._index > 0:
            self._index -= 1
            self._flipped = False
        return self.get_current_card()

    def reshuffle(self) -> None:
        self._cards = self._shuffler.shuffle(self._cards)
        self._reset_position()

    def _reset_position(self) -> None:
        self._index = 0
        self._flipped = False
