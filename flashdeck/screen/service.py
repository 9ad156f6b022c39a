import asyncio
import logging
import time
from typing import AsyncIterator, Callable, List, Optional, Tuple

from flashdeck.core.exceptions.domain import DeckStateError
from flashdeck.domain.deck.service import DeckController
from flashdeck.domain.flashcard.loader import FlashcardLoader, Source
from flashdeck.domain.flashcard.models import DeckEntry
from flashdeck.domain.flip.animation import Face
from flashdeck.domain.scheduling.repeating import RepeatingTask

from .views import CardView

logger = logging.getLogger(__name__)


class FlashcardScreen:
    """
    One flashcard screen for the length of its lifetime.

    `start()` loads the deck and begins reshuffling it, `close()` stops the
    reshuffle timer. Renderers subscribe to the deck for reorders and call
    `render()` or `frames()` for flip progress.
    """

    def __init__(
        self,
        loader: FlashcardLoader,
        deck: DeckController,
        source: Optional[Source] = None,
        reshuffle_interval: float = 15.0,
        frame_rate: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.loader = loader
        self.deck = deck
        self.source = source
        self.reshuffle_interval = reshuffle_interval
        self.frame_rate = frame_rate
        self.clock = clock
        self._reshuffle: Optional[RepeatingTask] = None

    @property
    def running(self) -> bool:
        return self._reshuffle is not None and self._reshuffle.running

    async def start(self) -> Tuple[DeckEntry, ...]:
        """
        Load the flashcards, initialize the deck and start the reshuffle timer.

        A document that cannot be loaded leaves the screen with an empty deck.

        Raises:
            DeckStateError: If the screen was already started
        """
        if self._reshuffle is not None:
            raise DeckStateError("start", "screen is already started")

        cards = self.loader.load_or_empty(self.source)
        entries = self.deck.initialize(cards)

        self._reshuffle = RepeatingTask(self.reshuffle_interval, self.deck.reshuffle_tick, name="deck-reshuffle")
        self._reshuffle.start()
        return entries

    async def close(self) -> None:
        if self._reshuffle is not None:
            await self._reshuffle.cancel()
        self.deck.observers.clear()
        logger.info("Flashcard screen closed")

    async def __aenter__(self) -> "FlashcardScreen":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def view(self, entry: DeckEntry, now: Optional[float] = None) -> CardView:
        now = self.clock() if now is None else now
        flip = self.deck.flip_state(entry.card_id)
        progress = flip.progress_at(now)
        face = flip.face_at(now)
        return CardView(
            card_id=entry.card_id,
            question=entry.question,
            answer=entry.answer,
            progress=progress,
            is_flipped=flip.is_flipped,
            phase=flip.phase_at(now),
            face=face,
            text=entry.question if face is Face.QUESTION else entry.answer,
        )

    def render(self, now: Optional[float] = None) -> List[CardView]:
        """Views for every card in current deck order, all sampled at the same instant."""
        now = self.clock() if now is None else now
        return [self.view(entry, now) for entry in self.deck.entries]

    def tap(self, card_id: int) -> CardView:
        now = self.clock()
        self.deck.tap(card_id, now)
        entry = next(entry for entry in self.deck.entries if entry.card_id == card_id)
        return self.view(entry, now)

    async def frames(self, card_id: int, frame_rate: Optional[int] = None) -> AsyncIterator[CardView]:
        """
        Yield the card's view once per frame until its flip animation settles.

        The final, settled view is always yielded.
        """
        interval = 1.0 / (frame_rate or self.frame_rate)
        flip = self.deck.flip_state(card_id)
        entry = next(entry for entry in self.deck.entries if entry.card_id == card_id)

        while True:
            now = self.clock()
            yield self.view(entry, now)
            if not flip.is_running(now):
                break
            await asyncio.sleep(interval)
