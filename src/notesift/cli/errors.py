"""notesift rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from notesift.cli.errors import err_no_db
    console.print(err_no_db("notes.db"))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_no_sources() -> str:
    """No PATH argument given."""
    return (
        "[red]Error:[/] No files specified.\n"
        "  Run:  notesift ingest PATH [PATH ...]"
    )


def err_path_not_found(path: str) -> str:
    return (
        f"[red]Error:[/] Path not found: '{path}'\n"
        "  Check the spelling, or pass a directory with --recursive."
    )


def err_no_db(db_path: str = ".notesift.db") -> str:
    """No note database at *db_path*."""
    return (
        f"[red]Error:[/] No database found at '{db_path}'.\n"
        "  Run:  notesift ingest PATH  to create it."
    )


def err_config(detail: str) -> str:
    """A config file failed validation."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {detail}\n"
        "  Fix notesift.yaml (or ~/.notesift/config.yaml) and re-run."
    )


def err_no_api_key(provider: str) -> str:
    """No API key for *provider*.

    Example:
        No API key for 'openai'. Set:  export OPENAI_API_KEY=sk-...
    """
    env_map = {
        "openai": "OPENAI_API_KEY",
        "anthropic": "ANTHROPIC_API_KEY",
        "gemini": "GEMINI_API_KEY",
        "mistral": "MISTRAL_API_KEY",
        "azure": "AZURE_API_KEY",
        "groq": "GROQ_API_KEY",
    }
    env_var = env_map.get(provider.lower(), f"{provider.upper()}_API_KEY")
    return (
        f"[red]Error:[/] No API key for '{provider}'.\n"
        f"  Set:  export {env_var}=sk-...\n"
        "  Or run without --transcribe to keep simulated transcriptions."
    )


def err_audio_too_large(path: str, size_mb: float, limit_mb: float = 25.0) -> str:
    """Audio file exceeds the transcription API limit."""
    return (
        f"[yellow]Warning:[/] Audio file exceeds {limit_mb:.0f} MB limit: '{path}' ({size_mb:.1f} MB)\n"
        "  A simulated transcription will be stored instead.\n"
        "  Tip:  ffmpeg -i input.mp3 -f segment -segment_time 600 -c copy part%03d.mp3"
    )
