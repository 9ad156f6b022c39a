import logging
import random
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from flashdeck.core.exceptions.domain import CardNotFoundError, DeckStateError
from flashdeck.domain.flashcard.models import DeckEntry, Flashcard
from flashdeck.domain.flip.animation import DEFAULT_FACE_THRESHOLD, DEFAULT_FLIP_DURATION, FlipAnimation

logger = logging.getLogger(__name__)

DeckObserver = Callable[[Tuple[DeckEntry, ...]], None]


class DeckObservers:
    """Keeps track of the renderers watching a deck and pushes snapshots to them."""

    def __init__(self):
        self.observers: List[DeckObserver] = []

    def subscribe(self, observer: DeckObserver) -> None:
        if observer not in self.observers:
            self.observers.append(observer)
            logger.debug(f"Deck observer registered: {observer!r}")

    def unsubscribe(self, observer: DeckObserver) -> None:
        if observer in self.observers:
            self.observers.remove(observer)
            logger.debug(f"Deck observer removed: {observer!r}")

    def clear(self) -> None:
        self.observers.clear()

    def notify(self, entries: Tuple[DeckEntry, ...]) -> None:
        """
        Send a deck snapshot to every observer.

        An observer that raises is dropped so it cannot break the others.
        """
        for observer in list(self.observers):
            try:
                observer(entries)
            except Exception as e:
                logger.error(f"Deck observer {observer!r} failed, removing it: {str(e)}")
                self.unsubscribe(observer)


class DeckController:
    """
    Owns the current ordering of the deck and the flip state of each card.

    The deck is only ever swapped for a complete new tuple, so anything reading
    `entries` sees either the old or the new ordering, never a partial one.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        flip_duration: float = DEFAULT_FLIP_DURATION,
        face_threshold: float = DEFAULT_FACE_THRESHOLD,
        reset_flips_on_reshuffle: bool = False,
    ):
        """
        Initialize DeckController.

        Args:
            rng (Optional[random.Random], optional): Random source for reshuffles. Defaults to a fresh one.
            flip_duration (float, optional): Seconds per flip animation.
            face_threshold (float, optional): Degrees at which a card shows its answer.
            reset_flips_on_reshuffle (bool, optional): Turn every card back to the question on reshuffle.
        """
        self.rng = rng or random.Random()
        self.flip_duration = flip_duration
        self.face_threshold = face_threshold
        self.reset_flips_on_reshuffle = reset_flips_on_reshuffle
        self.observers = DeckObservers()
        self._entries: Tuple[DeckEntry, ...] = ()
        self._flips: Dict[int, FlipAnimation] = {}
        self._initialized = False
        self.reshuffle_count = 0

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def entries(self) -> Tuple[DeckEntry, ...]:
        return self._entries

    @property
    def cards(self) -> Tuple[Flashcard, ...]:
        return tuple(entry.card for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def initialize(self, cards: Iterable[Flashcard]) -> Tuple[DeckEntry, ...]:
        """
        Set the initial ordering. Allowed exactly once per deck.

        Raises:
            DeckStateError: If the deck was already initialized
        """
        if self._initialized:
            raise DeckStateError("initialize", "deck is already initialized")

        entries = tuple(DeckEntry(card_id, card) for card_id, card in enumerate(cards))
        self._flips = {
            entry.card_id: FlipAnimation(duration=self.flip_duration, face_threshold=self.face_threshold)
            for entry in entries
        }
        self._entries = entries
        self._initialized = True

        logger.info(f"Deck initialized with {len(entries)} cards")
        self.observers.notify(self._entries)
        return self._entries

    def reshuffle_tick(self) -> Tuple[DeckEntry, ...]:
        """
        Replace the deck with a uniformly random permutation of its current order.

        Raises:
            DeckStateError: If the deck was never initialized
        """
        if not self._initialized:
            raise DeckStateError("reshuffle", "deck is not initialized")

        shuffled = list(self._entries)
        self.rng.shuffle(shuffled)
        self._entries = tuple(shuffled)
        self.reshuffle_count += 1

        if self.reset_flips_on_reshuffle:
            for flip in self._flips.values():
                flip.reset()

        logger.debug(f"Deck reshuffled ({self.reshuffle_count}): {[entry.card_id for entry in self._entries]}")
        self.observers.notify(self._entries)
        return self._entries

    def flip_state(self, card_id: int) -> FlipAnimation:
        try:
            return self._flips[card_id]
        except KeyError:
            raise CardNotFoundError(card_id) from None

    def tap(self, card_id: int, now: float) -> bool:
        """
        Flip a single card. Other cards are untouched.

        Returns:
            bool: Whether the card is now heading to its answer side
        """
        flipped = self.flip_state(card_id).tap(now)
        logger.debug(f"Card {card_id} tapped, flipped={flipped}")
        return flipped

    def subscribe(self, observer: DeckObserver) -> None:
        self.observers.subscribe(observer)

    def unsubscribe(self, observer: DeckObserver) -> None:
        self.observers.unsubscribe(observer)
