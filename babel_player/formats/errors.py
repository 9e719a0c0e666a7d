class LyricsFormatError(ValueError):
    pass


class TtmlParseError(LyricsFormatError):
    pass


class LrcParseError(LyricsFormatError):
    pass


class BabelJsonError(LyricsFormatError):
    pass


class LyricsExportError(OSError):
    pass
