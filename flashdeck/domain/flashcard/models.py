from dataclasses import dataclass

from flashdeck.core.exceptions.domain import FlashcardValidationError


@dataclass(frozen=True)
class Flashcard:
    """Domain model representing a Flashcard."""

    question: str
    answer: str

    def __post_init__(self):
        """Validate flashcard data after initialization."""
        if not self.question:
            raise FlashcardValidationError("question", "must not be empty")
        if not self.answer:
            raise FlashcardValidationError("answer", "must not be empty", self.question)


@dataclass(frozen=True)
class DeckEntry:
    """A flashcard together with the identity it keeps for the lifetime of a deck."""

    card_id: int
    card: Flashcard

    @property
    def question(self) -> str:
        return self.card.question

    @property
    def answer(self) -> str:
        return self.card.answer
