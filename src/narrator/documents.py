"""Documents and the sources that supply their text."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from .tts.models import VoiceName, default_voice_for_language

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """A work to narrate.

    Args:
        id: Stable identifier (for file sources, the file path)
        title: Display title, opaque to the playback engine
        author: Optional author, opaque to the playback engine
        text: Full text, None until fetched
        language: Language tag such as "en", "fr" or "ar"
        voice: Narrator voice; defaults to the language's preferred voice
    """

    id: str
    title: str = ""
    author: str | None = None
    text: str | None = None
    language: str = "fr"
    voice: VoiceName | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id cannot be empty")
        if self.voice is None:
            self.voice = default_voice_for_language(self.language)


class DocumentSource(ABC):
    """Supplies the full text of a document on demand."""

    @abstractmethod
    async def fetch_content(self, document: Document, language: str) -> str:
        """Fetch the full text of a document.

        Args:
            document: Document metadata
            language: Language the text should be in

        Returns:
            Full document text

        Raises:
            OSError: If the content cannot be retrieved
        """
        pass


class FileDocumentSource(DocumentSource):
    """Reads document text from a UTF-8 file named by the document id."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def fetch_content(self, document: Document, language: str) -> str:
        path = Path(document.id)
        return await asyncio.to_thread(path.read_text, encoding=self.encoding)


async def ensure_text(document: Document, source: DocumentSource) -> str:
    """Return the document text, fetching it once if it is absent.

    Args:
        document: Document whose text is needed; updated in place
        source: Source to fetch from when text is missing

    Returns:
        The document text
    """
    if document.text is None:
        logger.debug(f"Fetching content for document {document.id}")
        document.text = await source.fetch_content(document, document.language)
    return document.text
