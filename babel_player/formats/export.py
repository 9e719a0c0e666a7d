from __future__ import annotations

from uuid import UUID

from babel_player.lyrics.model import BabelLyrics


def _fmt_lrc_time(ms: int) -> str:
    m, rem = divmod(ms, 60_000)
    s, ms2 = divmod(rem, 1_000)
    # keep 2 decimals for compatibility
    return f"{m:02d}:{s:02d}.{ms2 // 10:02d}"


def export_lrc(doc: BabelLyrics, tags: dict[str, str] | None = None) -> str:
    """
    Enhanced LRC: [line start] then <word start>word ... <last word end>.
    Lines without segments keep only the line stamp.
    """
    tags = tags or {}
    out: list[str] = [f"[{k}:{tags[k]}]" for k in sorted(tags)]

    for line in doc.lines:
        parts = [f"[{_fmt_lrc_time(line.begin.ms)}]"]
        for seg in line.original:
            parts.append(f"<{_fmt_lrc_time(seg.begin.ms)}>{seg.text}")
        if line.original:
            parts.append(f"<{_fmt_lrc_time(line.original[-1].end.ms)}>")
        out.append("".join(parts))
    return "\n".join(out) + ("\n" if out else "")


def _fmt_srt_time(ms: int) -> str:
    # HH:MM:SS,mmm
    h, rem = divmod(ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms2 = divmod(rem, 1_000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms2:03d}"


def export_srt(doc: BabelLyrics, language_id: UUID | None = None) -> str:
    """
    One cue per line. With `language_id`, the line's translation for that
    language is added under the original text.
    """
    out: list[str] = []
    for i, line in enumerate(doc.lines, start=1):
        start = line.begin.ms
        end = max(line.end.ms, start + 1)
        out.append(str(i))
        out.append(f"{_fmt_srt_time(start)} --> {_fmt_srt_time(end)}")
        out.append(line.text.strip())
        if language_id is not None:
            translated = "".join(line.translations.get(language_id, [])).strip()
            if translated:
                out.append(translated)
        out.append("")
    return "\n".join(out)
