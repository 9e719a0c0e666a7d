class PlaybackError(RuntimeError):
    pass


class AudioLoadError(PlaybackError):
    pass
