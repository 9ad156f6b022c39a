import io
import logging
import os
import xml.etree.ElementTree as ET
from contextlib import contextmanager
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import IO, Iterator, List, Optional, Tuple, Union

from flashdeck.core.error_handling import handle_service_errors
from flashdeck.core.exceptions.domain import LoadError, MalformedDocumentError, ResourceMissingError

from .models import Flashcard

logger = logging.getLogger(__name__)

BUNDLED_PACKAGE = "flashdeck"
BUNDLED_RESOURCE = ("resources", "flashcards.xml")

Source = Union[str, os.PathLike, IO, Traversable]


def bundled_resource() -> Traversable:
    """Return the flashcard document shipped with the package."""
    return resources.files(BUNDLED_PACKAGE).joinpath(*BUNDLED_RESOURCE)


class FlashcardLoader:
    """
    Reads a flashcard XML document in a single forward pass.

    The document is a root element holding ``card`` elements, each with an
    optional ``question`` and ``answer``. Cards missing either field, or with
    an empty one, are skipped. Unknown elements and all attributes are ignored.
    """

    CARD_TAG = "card"
    QUESTION_TAG = "question"
    ANSWER_TAG = "answer"

    def __init__(self, strip_whitespace: bool = False, chunk_size: int = 64 * 1024):
        """
        Initialize FlashcardLoader.

        Args:
            strip_whitespace (bool, optional): Strip text around questions and answers. Defaults to False.
            chunk_size (int, optional): Bytes fed to the parser per read. Defaults to 64 KiB.
        """
        self.strip_whitespace = strip_whitespace
        self.chunk_size = chunk_size

    def load(self, source: Source) -> Tuple[Flashcard, ...]:
        """
        Load flashcards from a path, an open file or a package resource.

        Args:
            source (Source): Where to read the document from

        Returns:
            Tuple[Flashcard, ...]: Well-formed cards in document order

        Raises:
            ResourceMissingError: If the source does not exist or cannot be opened
            MalformedDocumentError: If the document is not well-formed XML
        """
        name = self._describe(source)
        with self._open(source, name) as stream:
            cards = self._scan(stream, name)
        logger.info(f"Loaded {len(cards)} flashcards from {name}")
        return cards

    def load_string(self, document: str, source_name: str = "<string>") -> Tuple[Flashcard, ...]:
        """Load flashcards from an in-memory document."""
        return self._scan(io.StringIO(document), source_name)

    def load_bundled(self) -> Tuple[Flashcard, ...]:
        """Load the flashcard document shipped with the package."""
        return self.load(bundled_resource())

    @handle_service_errors(default_return_value=(), expected=(LoadError,))
    def load_or_empty(self, source: Optional[Source] = None) -> Tuple[Flashcard, ...]:
        """
        Startup entry point: load the deck, falling back to an empty one.

        Never raises. Load failures are logged as warnings and anything
        unexpected is logged with its traceback.
        """
        if source is None:
            return self.load_bundled()
        return self.load(source)

    @staticmethod
    def _describe(source: Source) -> str:
        if isinstance(source, (str, os.PathLike)):
            return os.fspath(source)
        return getattr(source, "name", None) or repr(source)

    @contextmanager
    def _open(self, source: Source, name: str) -> Iterator[IO]:
        if hasattr(source, "read"):
            yield source
            return

        path = Path(source) if isinstance(source, (str, os.PathLike)) else source
        if not path.is_file():
            raise ResourceMissingError(name)

        try:
            stream = path.open("rb")
        except OSError as e:
            raise ResourceMissingError(name, str(e)) from e

        with stream:
            yield stream

    def _text(self, element: ET.Element) -> str:
        text = element.text or ""
        return text.strip() if self.strip_whitespace else text

    @staticmethod
    def _local_name(tag: str) -> str:
        return tag.rsplit("}", 1)[-1]

    def _scan(self, stream: IO, name: str) -> Tuple[Flashcard, ...]:
        parser = ET.XMLPullParser(events=("start", "end"))
        cards: List[Flashcard] = []
        pending_question: Optional[str] = None
        pending_answer: Optional[str] = None
        capturing: Optional[str] = None
        open_elements: List[ET.Element] = []
        card_count = 0

        try:
            while True:
                chunk = stream.read(self.chunk_size)
                if chunk:
                    parser.feed(chunk)
                else:
                    parser.close()

                for event, element in parser.read_events():
                    tag = self._local_name(element.tag)

                    if event == "start":
                        open_elements.append(element)
                        if capturing is not None:
                            raise MalformedDocumentError(name, f"element <{tag}> nested inside <{capturing}>")
                        if tag == self.CARD_TAG:
                            pending_question = None
                            pending_answer = None
                            card_count += 1
                        elif tag in (self.QUESTION_TAG, self.ANSWER_TAG):
                            capturing = tag
                        continue

                    open_elements.pop()
                    if tag == self.QUESTION_TAG and capturing == tag:
                        pending_question = self._text(element)
                        capturing = None
                    elif tag == self.ANSWER_TAG and capturing == tag:
                        pending_answer = self._text(element)
                        capturing = None
                    elif tag == self.CARD_TAG:
                        if pending_question and pending_answer:
                            cards.append(Flashcard(pending_question, pending_answer))
                        else:
                            logger.debug(f"Skipping incomplete card #{card_count} in {name}")
                        element.clear()
                        if open_elements:
                            open_elements[-1].remove(element)

                if not chunk:
                    break
        except ET.ParseError as e:
            raise MalformedDocumentError(name, str(e), getattr(e, "position", None)) from e
        except UnicodeDecodeError as e:
            raise MalformedDocumentError(name, f"undecodable content: {e.reason}") from e
        except OSError as e:
            raise LoadError(f"Failed to read flashcard document {name}: {e}", name) from e

        skipped = card_count - len(cards)
        if skipped:
            logger.info(f"Skipped {skipped} incomplete flashcards in {name}")

        return tuple(cards)
