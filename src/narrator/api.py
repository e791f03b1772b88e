"""High-level API for narrator library usage."""

from .config import load_config
from .core import narrate_document
from .documents import Document
from .tts.models import VoiceName


async def narrate(
    text: str,
    voice: VoiceName | str | None = None,
    provider: str | None = None,
    language: str = "fr",
    start: int = 0,
    soothing: bool | None = None,
    user: str | None = None,
) -> float:
    """Narrate text paragraph by paragraph through the speakers.

    Args:
        text: Text to narrate; paragraphs are separated by blank lines
        voice: Narrator voice or voice name (defaults to the language's voice)
        provider: Synthesis provider name (from config if omitted)
        language: Language tag of the text
        start: Paragraph to begin with
        soothing: Style flag (from config if omitted)
        user: Listener credited with listening time (from config if omitted)

    Returns:
        Seconds of listening credited for the session

    Raises:
        SegmentationEmptyError: If the text has nothing to narrate
        SynthesisError: If a paragraph cannot be synthesized
        OutputError: If audio playback fails
        ValueError: If the voice name is unknown or start is out of range
        KeyError: If provider not found
    """
    if isinstance(voice, str):
        voice = VoiceName.parse(voice)

    document = Document(id="inline", text=text, language=language, voice=voice)
    result = await narrate_document(
        document,
        load_config(),
        provider_name=provider,
        start_index=start,
        soothing=soothing,
        user=user,
    )
    return result["listened"]
