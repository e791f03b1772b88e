"""narrator - paragraph-by-paragraph narrated reading with prefetched synthesis."""

__version__ = "0.1.0"
__all__ = ["narrate"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "narrate":
        from .api import narrate

        return narrate
    raise AttributeError(f"module 'narrator' has no attribute {name!r}")
