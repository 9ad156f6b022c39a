import random

from flashdeck.core.config import Settings
from flashdeck.domain.deck.service import DeckController
from flashdeck.domain.flashcard.loader import FlashcardLoader
from flashdeck.screen.service import FlashcardScreen
from main import flip_card, run

DOCUMENT = "<flashcards><card><question>2+2</question><answer>4</answer></card></flashcards>"


class TestConsoleFlips:

    async def test_flip_known_card_prints_answer(self, tmp_path, capsys):
        path = tmp_path / "flashcards.xml"
        path.write_text(DOCUMENT, encoding="utf-8")
        screen = FlashcardScreen(FlashcardLoader(), DeckController(rng=random.Random(1)), source=path)

        async with screen:
            assert await flip_card(screen, 0) is True

        assert "Card 0 shows: 4" in capsys.readouterr().out

    async def test_flip_unknown_card_is_reported(self, tmp_path, capsys):
        path = tmp_path / "flashcards.xml"
        path.write_text(DOCUMENT, encoding="utf-8")
        screen = FlashcardScreen(FlashcardLoader(), DeckController(), source=path)

        async with screen:
            assert await flip_card(screen, 7) is False

        out = capsys.readouterr().out
        assert "Error occurred: Card not found in deck: 7" in out

    async def test_run_with_empty_deck_does_not_raise(self, tmp_path, capsys):
        config = Settings(resource_path=tmp_path / "missing.xml")

        await run(config, duration=0, flips=[0])

        assert "Error occurred" in capsys.readouterr().out
