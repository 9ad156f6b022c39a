import argparse
import asyncio
import logging
from typing import Tuple

from flashdeck.core.config import Settings
from flashdeck.core.container import create_screen, init_logging
from flashdeck.core.exceptions.domain import CardNotFoundError
from flashdeck.domain.flashcard.models import DeckEntry
from flashdeck.screen.service import FlashcardScreen

logger = logging.getLogger("flashdeck.console")


def parse_arguments():
    parser = argparse.ArgumentParser(description='Show a reshuffling flashcard deck on the console.')
    parser.add_argument('--resource', default=None, help='Flashcard XML document (defaults to the bundled deck)')
    parser.add_argument('--duration', type=float, default=60.0, help='Seconds to keep the screen open')
    parser.add_argument('--interval', type=float, default=None, help='Seconds between reshuffles')
    parser.add_argument('--flip', type=int, action='append', default=[], help='Card id to flip after start')
    return parser.parse_args()


def build_settings(args) -> Settings:
    overrides = {}
    if args.resource:
        overrides["resource_path"] = args.resource
    if args.interval:
        overrides["reshuffle_interval_seconds"] = args.interval
    return Settings(**overrides)


def print_deck(entries: Tuple[DeckEntry, ...]) -> None:
    """Console renderer: one line per card in deck order."""
    print("-" * 40)
    for position, entry in enumerate(entries, start=1):
        print(f"{position:>3}. [{entry.card_id}] {entry.question}")


async def flip_card(screen: FlashcardScreen, card_id: int) -> bool:
    """Flip one card and print the side it settles on. Unknown ids are reported, not raised."""
    try:
        screen.tap(card_id)
    except CardNotFoundError as e:
        print(f"Error occurred: {e.message} (deck has {len(screen.deck)} cards)")
        return False

    async for view in screen.frames(card_id):
        logger.debug(f"card {view.card_id} at {view.progress:.1f} degrees")
    print(f"Card {view.card_id} shows: {view.text}")
    return True


async def run(config: Settings, duration: float, flips: list) -> None:
    screen = create_screen(config)
    screen.deck.subscribe(print_deck)

    async with screen:
        for card_id in flips:
            await flip_card(screen, card_id)
        await asyncio.sleep(duration)


def main():
    args = parse_arguments()
    config = build_settings(args)
    init_logging(config)

    try:
        asyncio.run(run(config, args.duration, args.flip))
    except KeyboardInterrupt:
        print("Closing flashcard screen")


if __name__ == "__main__":
    main()
