from .domain.deck.service import DeckController
from .domain.flashcard.loader import FlashcardLoader
from .domain.flashcard.models import DeckEntry, Flashcard
from .screen.service import FlashcardScreen

__all__ = ['Flashcard', 'DeckEntry', 'FlashcardLoader', 'DeckController', 'FlashcardScreen']
