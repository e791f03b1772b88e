"""Typer CLI definition for narrator."""

import asyncio
import logging
import sys
from pathlib import Path

import typer

from .config import load_config
from .core import list_provider_voices, narrate_document, voice_table
from .documents import Document, FileDocumentSource
from .segmenter import Chunk, segment
from .stats.storage import StatsStore
from .tts.errors import (
    DecodeError,
    OutputError,
    SegmentationEmptyError,
    SynthesisAuthError,
    SynthesisError,
)
from .tts.models import VoiceName, default_voice_for_language

app = typer.Typer(help="Narrate long texts paragraph by paragraph using AI voices")


def process_text_input(text: str | None) -> str:
    """Process text input and return the text to narrate.

    Args:
        text: Optional text input from CLI argument

    Returns:
        The text to narrate

    Raises:
        ValueError: If no text is provided
    """
    if text is None:
        raise ValueError("No text provided")

    return text


def read_text(text: str | None, file: Path | None, debug: bool) -> str:
    """Get text from argument, file, or stdin (in priority order)."""
    if text is None:
        if file:
            try:
                text = file.read_text()
            except FileNotFoundError as e:
                if debug:
                    typer.echo(f"Debug - File not found: {file} ({e!r})", err=True)
                else:
                    typer.echo(f"Error: File not found: {file}", err=True)
                raise typer.Exit(1) from None
            except PermissionError as e:
                if debug:
                    typer.echo(f"Debug - Permission denied: {file} ({e!r})", err=True)
                else:
                    typer.echo(
                        f"Error: Permission denied reading file: {file}", err=True
                    )
                raise typer.Exit(1) from None
            except UnicodeDecodeError as e:
                if debug:
                    typer.echo(f"Debug - Decode error: {file} ({e!r})", err=True)
                else:
                    typer.echo(
                        f"Error: Unable to decode file as text: {file}", err=True
                    )
                raise typer.Exit(1) from None
        elif not sys.stdin.isatty():
            text = sys.stdin.read()

    try:
        return process_text_input(text)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def resolve_voice(
    voice: str | None, configured: str, language: str
) -> VoiceName:
    """Pick the voice: CLI flag, then config, then the language default.

    Raises:
        ValueError: If a given voice name is unknown
    """
    if voice:
        return VoiceName.parse(voice)
    if configured:
        return VoiceName.parse(configured)
    return default_voice_for_language(language)


def format_duration(seconds: float) -> str:
    """Format seconds as e.g. "1h 02m 03s" or "4m 05s"."""
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    return f"{minutes}m {secs:02d}s"


@app.command()
def read(
    text: str | None = typer.Argument(None, help="Text to narrate"),
    file: Path | None = typer.Option(None, "-f", "--file", help="Read text from file"),
    voice: str | None = typer.Option(
        None, "-v", "--voice", help="Narrator voice (from config or language if omitted)"
    ),
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="Synthesis provider (from config if omitted)"
    ),
    language: str = typer.Option(
        "fr", "-l", "--language", help="Language of the text (fr, en, ar, ...)"
    ),
    start: int = typer.Option(
        1, "-s", "--start", min=1, help="Paragraph number to start from"
    ),
    soothing: bool | None = typer.Option(
        None, "--soothing/--no-soothing", help="Calm narration style flag"
    ),
    user: str | None = typer.Option(
        None, "-u", "--user", help="Listener credited with listening time"
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Show verbose error messages and cache activity"
    ),
) -> None:
    """Narrate text paragraph by paragraph. Press Ctrl-C to stop."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    config = load_config()
    # A file is read lazily by the document source; text and stdin are read now
    lazy_file = text is None and file is not None
    content = None if lazy_file else read_text(text, None, debug)

    try:
        chosen_voice = resolve_voice(voice, config.synthesis.voice, language)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    document = Document(
        id=str(file) if lazy_file else "stdin",
        title=file.stem if lazy_file else "",
        text=content,
        language=language,
        voice=chosen_voice,
    )

    def show_chunk(index: int, chunk: Chunk) -> None:
        total = len(segment(document.text))
        typer.echo(f"\n[{index + 1} / {total}]")
        typer.echo(chunk.text)

    try:
        result = asyncio.run(
            narrate_document(
                document,
                config,
                provider_name=provider,
                start_index=start - 1,
                soothing=soothing,
                user=user,
                source=FileDocumentSource() if lazy_file else None,
                on_chunk=show_chunk,
                handle_interrupt=True,
            )
        )
    except SegmentationEmptyError as e:
        typer.echo(f"Warning: {e}", err=True)
        raise typer.Exit(0) from None
    except FileNotFoundError as e:
        if debug:
            typer.echo(f"Debug - File not found: {file} ({e!r})", err=True)
        else:
            typer.echo(f"Error: File not found: {file}", err=True)
        raise typer.Exit(1) from None
    except PermissionError as e:
        if debug:
            typer.echo(f"Debug - Permission denied: {file} ({e!r})", err=True)
        else:
            typer.echo(f"Error: Permission denied reading file: {file}", err=True)
        raise typer.Exit(1) from None
    except UnicodeDecodeError as e:
        if debug:
            typer.echo(f"Debug - Decode error: {file} ({e!r})", err=True)
        else:
            typer.echo(f"Error: Unable to decode file as text: {file}", err=True)
        raise typer.Exit(1) from None
    except SynthesisAuthError as e:
        if debug:
            typer.echo(f"Debug - Authentication error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except SynthesisError as e:
        if debug:
            typer.echo(f"Debug - Synthesis error: {e!r}", err=True)
        else:
            typer.echo(f"Error: Speech synthesis failed, try again: {e}", err=True)
        raise typer.Exit(1) from None
    except DecodeError as e:
        if debug:
            typer.echo(f"Debug - Decode error: {e!r}", err=True)
        else:
            typer.echo(f"Error: Received malformed audio: {e}", err=True)
        raise typer.Exit(1) from None
    except OutputError as e:
        if debug:
            typer.echo(f"Debug - Audio playback error: {e!r}", err=True)
        else:
            typer.echo(f"Error: Failed to play audio: {e}", err=True)
        raise typer.Exit(1) from None
    except KeyError as e:
        typer.echo(f"Error: {e.args[0] if e.args else e}", err=True)
        raise typer.Exit(1) from None
    except ValueError as e:
        if debug:
            typer.echo(f"Debug - Invalid input: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except Exception as e:
        if debug:
            typer.echo(f"Debug - Unexpected error: {e!r}", err=True)
        else:
            typer.echo("Error: An unexpected error occurred", err=True)
        raise typer.Exit(1) from None

    status = "Finished" if result["completed"] else "Stopped"
    typer.echo(
        f"\n{status} at paragraph {result['last_index'] + 1} / {result['chunks']} "
        f"({format_duration(result['listened'])} listened)"
    )


@app.command()
def voices(
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="Ask this provider for the voices it offers"
    ),
) -> None:
    """List narrator voices and the provider voice each one uses."""
    if provider is None:
        for voice, provider_voice in voice_table():
            typer.echo(f"{voice.short_name:<8} {voice.value:<28} -> {provider_voice}")
        return

    try:
        offered = asyncio.run(list_provider_voices(provider))
    except KeyError as e:
        typer.echo(f"Error: {e.args[0] if e.args else e}", err=True)
        raise typer.Exit(1) from None
    except SynthesisAuthError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except SynthesisError as e:
        typer.echo(f"Error: Could not list voices: {e}", err=True)
        raise typer.Exit(1) from None

    for entry in offered:
        typer.echo(f"{entry['id']:<24} {entry.get('name', '')}")


@app.command()
def stats(
    user: str | None = typer.Option(
        None, "-u", "--user", help="Listener to show (from config if omitted)"
    ),
) -> None:
    """Show cumulative listening time."""
    config = load_config()
    user_id = user or config.stats.user
    record = StatsStore().get(user_id)
    if record is None:
        typer.echo(f"No listening recorded for {user_id}")
        return
    typer.echo(f"User: {record.user_id}")
    typer.echo(f"Total listening time: {format_duration(record.total_seconds)}")
    typer.echo(f"Sessions: {record.sessions}")
    typer.echo(f"Last active: {record.last_active:%Y-%m-%d %H:%M}")


@app.command()
def chunks(
    text: str | None = typer.Argument(None, help="Text to split"),
    file: Path | None = typer.Option(None, "-f", "--file", help="Read text from file"),
) -> None:
    """Show how text is split into narration paragraphs."""
    content = read_text(text, file, debug=False)
    parts = segment(content)
    if not parts:
        typer.echo("No paragraphs to narrate")
        return
    for chunk in parts:
        preview = chunk.text if len(chunk.text) <= 60 else chunk.text[:57] + "..."
        typer.echo(f"{chunk.index + 1:>4}  {preview}")
