import logging
import threading

from babel_player.loader import BackgroundLoader, Failed, Idle, Loading, Succeeded


def _boom():
    raise ValueError("bad file")


class TestBackgroundLoader:
    def test_starts_idle(self):
        loader = BackgroundLoader("lyrics")
        assert isinstance(loader.poll(), Idle)
        assert loader.take() is None
        loader.shutdown()

    def test_success(self):
        loader = BackgroundLoader("lyrics")
        assert loader.start(lambda x: x * 2, 21, label="answer")
        st = loader.wait(timeout=5)
        assert st == Succeeded(label="answer", value=42)
        assert loader.take() == 42
        assert isinstance(loader.state, Idle)
        loader.shutdown()

    def test_failure_is_logged_and_yields_none(self, caplog):
        loader = BackgroundLoader("audio")
        loader.start(_boom, label="song.flac")
        st = loader.wait(timeout=5)
        assert isinstance(st, Failed)
        assert isinstance(st.error, ValueError)

        with caplog.at_level(logging.WARNING, logger="babel_player.loader"):
            assert loader.take() is None
        assert "song.flac" in caplog.text
        assert "bad file" in caplog.text
        assert isinstance(loader.state, Idle)
        loader.shutdown()

    def test_second_start_refused_while_loading(self):
        gate = threading.Event()
        loader = BackgroundLoader("lyrics")
        assert loader.start(gate.wait, 5, label="first")
        assert isinstance(loader.state, Loading)
        assert loader.loading

        assert not loader.start(lambda: "second", label="second")

        gate.set()
        st = loader.wait(timeout=5)
        assert isinstance(st, Succeeded)
        assert st.label == "first"
        loader.shutdown()

    def test_label_defaults_to_function_name(self):
        loader = BackgroundLoader("lyrics")
        loader.start(_boom)
        assert loader.state == Loading(label="_boom")
        loader.wait(timeout=5)
        loader.shutdown()
