import logging
import random
from typing import Optional

from flashdeck.core.config import Settings, settings
from flashdeck.core.logging import setup_logging
from flashdeck.domain.deck.service import DeckController
from flashdeck.domain.flashcard.loader import FlashcardLoader
from flashdeck.screen.service import FlashcardScreen

logger = logging.getLogger(__name__)


def create_loader(config: Optional[Settings] = None) -> FlashcardLoader:
    config = config or settings
    return FlashcardLoader(strip_whitespace=config.strip_whitespace)


def create_deck(config: Optional[Settings] = None) -> DeckController:
    config = config or settings
    return DeckController(
        rng=random.Random(config.shuffle_seed),
        flip_duration=config.flip_duration_ms / 1000,
        face_threshold=config.face_threshold_degrees,
        reset_flips_on_reshuffle=config.reset_flips_on_reshuffle,
    )


def create_screen(config: Optional[Settings] = None) -> FlashcardScreen:
    """
    Build a flashcard screen wired from settings.

    Args:
        config (Optional[Settings], optional): Settings to use. Defaults to the module settings.

    Returns:
        FlashcardScreen: A screen that has not been started yet
    """
    config = config or settings
    screen = FlashcardScreen(
        loader=create_loader(config),
        deck=create_deck(config),
        source=config.resource_path,
        reshuffle_interval=config.reshuffle_interval_seconds,
        frame_rate=config.frame_rate,
    )
    logger.info(f"Flashcard screen created for {config.resource_path or 'bundled resource'}")
    return screen


def init_logging(config: Optional[Settings] = None) -> None:
    config = config or settings
    setup_logging(level=config.log_level, json_output=config.log_json)
