from __future__ import annotations

import dataclasses
from pathlib import Path
from uuid import UUID

import typer

from babel_player.app import watch as watch_loop
from babel_player.config import load_config, save_config_show_translations
from babel_player.formats import LyricsExportError, LyricsFormatError, load_document
from babel_player.formats.babel_json import dumps, save_file
from babel_player.formats.export import export_lrc, export_srt
from babel_player.formats.lrc import parse_lrc_with_stats
from babel_player.lyrics import editor
from babel_player.lyrics.model import BabelLyrics, Line
from babel_player.lyrics.timestamp import Timestamp
from babel_player.logging_setup import setup_logging
from babel_player.sync.resolver import resolve


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load(path: Path) -> BabelLyrics:
    try:
        return load_document(path)
    except (LyricsFormatError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _save(doc: BabelLyrics, path: Path) -> None:
    try:
        save_file(doc, path)
    except LyricsExportError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _language_id(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise typer.BadParameter(f"not a language id: {value}")


@app.command()
def play(
    lyrics: Path = typer.Argument(..., help="Lyrics file (.json, .ttml, .lrc)"),
    audio: Path | None = typer.Option(None, "--audio", help="Audio file to play along"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    refresh_hz: float | None = typer.Option(None, "--refresh-hz", help="Display refresh rate (Hz)"),
    no_alt_screen: bool = typer.Option(False, "--no-alt-screen", help="Do not use alternate screen buffer"),
    context_lines: int | None = typer.Option(None, "--context", help="Lines shown above the current one"),
):
    """
    Play lyrics in the terminal, optionally with audio.
    """
    cfg = load_config()
    if refresh_hz is not None:
        cfg = dataclasses.replace(cfg, refresh_hz=refresh_hz)
    if context_lines is not None:
        cfg = dataclasses.replace(cfg, context_lines=context_lines)
    if no_alt_screen:
        cfg = dataclasses.replace(cfg, use_alt_screen=False)

    setup_logging(debug)
    backend_factory = None
    if audio is not None:
        # imported lazily: needs the PortAudio library at import time
        from babel_player.playback.sounddevice_backend import SoundDeviceBackend

        backend_factory = SoundDeviceBackend
    raise typer.Exit(code=watch_loop(cfg, lyrics, audio, backend_factory=backend_factory))


@app.command()
def info(path: Path):
    """Load a lyrics file and print a summary."""
    if path.suffix.lower() == ".lrc":
        try:
            _doc, stats = parse_lrc_with_stats(path.read_text(encoding="utf-8"))
        except (LyricsFormatError, OSError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"lines_total={stats.lines_total}")
        typer.echo(f"lines_with_timestamps={stats.lines_with_timestamps}")
        typer.echo(f"lines_ignored={stats.lines_ignored}")

    doc = _load(path)
    typer.echo(f"lines={len(doc.lines)}")
    typer.echo(f"segments={sum(len(line.original) for line in doc.lines)}")
    if doc.lines:
        typer.echo(f"span={min(line.begin for line in doc.lines)} - {max(line.end for line in doc.lines)}")
    typer.echo(f"agents={[a.id for a in doc.metadata.agents]}")
    for lang in doc.metadata.translations:
        typer.echo(f"language {lang.id} {lang.display_name}")


@app.command()
def convert(
    path: Path,
    fmt: str = typer.Option("json", "--format", case_sensitive=False, help="json|lrc|srt"),
    language: str | None = typer.Option(None, "--language", help="Translation language id (srt)"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
):
    """Convert lyrics to Babel JSON, enhanced LRC or SRT."""
    doc = _load(path)
    fmt_l = fmt.lower()
    if fmt_l == "json":
        data = dumps(doc)
    elif fmt_l == "lrc":
        data = export_lrc(doc)
    elif fmt_l == "srt":
        data = export_srt(doc, _language_id(language) if language else None)
    else:
        raise typer.BadParameter("format must be one of: json, lrc, srt")

    if out:
        try:
            out.write_text(data, encoding="utf-8")
        except OSError as e:
            typer.echo(f"Error: cannot write {out}: {e}", err=True)
            raise typer.Exit(code=1)
    else:
        typer.echo(data, nl=False)


@app.command(name="resolve")
def resolve_at(
    path: Path,
    at: int = typer.Option(..., "--at", help="Playback position in milliseconds"),
):
    """Print what is active at a given position."""
    doc = _load(path)
    window = resolve(doc, max(at, 0))
    if window.active_line is None:
        typer.echo("no active line")
        return
    typer.echo(f"line[{window.line_index}]={window.active_line.text}")
    for i in window.segment_indices:
        typer.echo(f"segment[{i}]={window.active_line.original[i].text}")
    for lang_id, indices in window.highlighted_translation_indices.items():
        words = window.active_line.translations.get(lang_id, [])
        picked = [words[i] for i in sorted(indices) if i < len(words)]
        typer.echo(f"{lang_id}: {sorted(indices)} {picked}")


@app.command(name="add-language")
def add_language(
    path: Path,
    name: str,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Register a translation language and save as Babel JSON."""
    doc = _load(path)
    lang_id = editor.add_language(doc, name)
    _save(doc, out or path.with_suffix(".json"))
    typer.echo(str(lang_id))


@app.command(name="remove-language")
def remove_language(
    path: Path,
    language: str,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Drop a translation language and every translation in it."""
    doc = _load(path)
    lang_id = _language_id(language)
    if doc.language(lang_id) is None:
        typer.echo(f"Language {lang_id} not found, nothing to do", err=True)
    editor.remove_language(doc, lang_id)
    _save(doc, out or path.with_suffix(".json"))


# --- editing -----------------------------------------------------------------

segment_app = typer.Typer(no_args_is_help=True, help="Edit the timed segments of a line.")
word_app = typer.Typer(no_args_is_help=True, help="Edit the translated words of a line.")
line_app = typer.Typer(no_args_is_help=True, help="Add lines and set their singer.")
app.add_typer(segment_app, name="segment")
app.add_typer(word_app, name="word")
app.add_typer(line_app, name="line")


def _line(doc: BabelLyrics, index: int) -> Line:
    if not 0 <= index < len(doc.lines):
        raise typer.BadParameter(f"no line {index} (document has {len(doc.lines)})")
    return doc.lines[index]


def _registered(doc: BabelLyrics, value: str) -> UUID:
    lang_id = _language_id(value)
    if doc.language(lang_id) is None:
        raise typer.BadParameter(f"language {lang_id} is not registered")
    return lang_id


def _ms(value: int | None) -> Timestamp | None:
    return Timestamp(value) if value is not None else None


@segment_app.command("insert")
def segment_insert(
    path: Path,
    line: int,
    at: int,
    begin: int | None = typer.Option(None, "--begin", min=0, help="Begin (ms)"),
    end: int | None = typer.Option(None, "--end", min=0, help="End (ms)"),
    text: str | None = typer.Option(None, "--text"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Insert a segment at position AT (clamped to the line)."""
    doc = _load(path)
    target = _line(doc, line)
    seg = editor.insert_segment(doc, target, at)
    index = next(i for i, s in enumerate(target.original) if s is seg)
    editor.update_segment(target, index, begin=_ms(begin), end=_ms(end), text=text)
    _save(doc, out or path.with_suffix(".json"))
    typer.echo(str(index))


@segment_app.command("remove")
def segment_remove(
    path: Path,
    line: int,
    index: int,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Remove one segment; its word associations go with it."""
    doc = _load(path)
    if editor.remove_segment(_line(doc, line), index) is None:
        typer.echo(f"No segment {index}, nothing to do", err=True)
    _save(doc, out or path.with_suffix(".json"))


@segment_app.command("move")
def segment_move(
    path: Path,
    line: int,
    index: int,
    to: int,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Swap segment INDEX with segment TO."""
    doc = _load(path)
    editor.move_segment(_line(doc, line), index, to)
    _save(doc, out or path.with_suffix(".json"))


@segment_app.command("set")
def segment_set(
    path: Path,
    line: int,
    index: int,
    begin: int | None = typer.Option(None, "--begin", min=0, help="Begin (ms)"),
    end: int | None = typer.Option(None, "--end", min=0, help="End (ms)"),
    text: str | None = typer.Option(None, "--text"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Change the timing or text of one segment."""
    doc = _load(path)
    editor.update_segment(_line(doc, line), index, begin=_ms(begin), end=_ms(end), text=text)
    _save(doc, out or path.with_suffix(".json"))


@word_app.command("add")
def word_add(
    path: Path,
    line: int,
    language: str,
    text: str,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Append a translated word; prints its index."""
    doc = _load(path)
    index = editor.add_translation_word(_line(doc, line), _registered(doc, language), text)
    _save(doc, out or path.with_suffix(".json"))
    typer.echo(str(index))


@word_app.command("set")
def word_set(
    path: Path,
    line: int,
    language: str,
    index: int,
    text: str,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Replace the text of one translated word."""
    doc = _load(path)
    editor.set_translation_word(_line(doc, line), _registered(doc, language), index, text)
    _save(doc, out or path.with_suffix(".json"))


@word_app.command("remove")
def word_remove(
    path: Path,
    line: int,
    language: str,
    index: int,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Remove a translated word and renumber the associations after it."""
    doc = _load(path)
    editor.remove_translation_word(_line(doc, line), _registered(doc, language), index)
    _save(doc, out or path.with_suffix(".json"))


@app.command()
def associate(
    path: Path,
    line: int,
    segment: int,
    language: str,
    word: int,
    include: bool = typer.Option(True, "--include/--exclude", help="Link or unlink the word"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Link (or unlink) a translated word to a segment for highlighting."""
    doc = _load(path)
    target = _line(doc, line)
    if not 0 <= segment < len(target.original):
        raise typer.BadParameter(f"no segment {segment} in line {line}")
    lang_id = _registered(doc, language)
    editor.toggle_segment_word_association(target.original[segment], lang_id, word, include)
    _save(doc, out or path.with_suffix(".json"))


@line_app.command("add")
def line_add(
    path: Path,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Append an empty line; prints its index."""
    doc = _load(path)
    editor.add_line(doc)
    _save(doc, out or path.with_suffix(".json"))
    typer.echo(str(len(doc.lines) - 1))


@line_app.command("agent")
def line_agent(
    path: Path,
    line: int,
    agent: str,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Set the singer (agent id) of a line."""
    doc = _load(path)
    editor.set_line_agent(_line(doc, line), agent)
    _save(doc, out or path.with_suffix(".json"))


@app.command(name="rename-language")
def rename_language(
    path: Path,
    language: str,
    name: str,
    out: Path | None = typer.Option(None, "--out", help="Output file (default: overwrite input as JSON)"),
):
    """Change the display name of a translation language."""
    doc = _load(path)
    editor.rename_language(doc, _registered(doc, language), name)
    _save(doc, out or path.with_suffix(".json"))


@app.command()
def config(
    translations: bool | None = typer.Option(
        None, "--translations/--no-translations", help="Show translations under the active line"
    ),
):
    """Show or change persistent settings."""
    if translations is not None:
        cfg_path = save_config_show_translations(translations)
        typer.echo(f"Saved: {cfg_path}")
    cfg = load_config()
    typer.echo(f"show_translations={cfg.show_translations}")
    typer.echo(f"refresh_hz={cfg.refresh_hz}")
    typer.echo(f"context_lines={cfg.context_lines}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
