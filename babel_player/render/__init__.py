from .ansi import AnsiRenderer, Theme, compose_frame

__all__ = ["AnsiRenderer", "Theme", "compose_frame"]
