"""Tests for coastal_sizing.callbacks — callback protocol and implementations."""

import logging

from coastal_sizing.callbacks import LoggingCallback, NullCallback, SizingCallback


class TestNullCallback:
    def test_implements_protocol(self):
        assert isinstance(NullCallback(), SizingCallback)

    def test_on_status_does_nothing(self):
        cb = NullCallback()
        cb.on_status("building slope layer")  # should not raise

    def test_on_metric_does_nothing(self):
        cb = NullCallback()
        cb.on_metric("grading_iterations", 42)

    def test_on_file_does_nothing(self):
        cb = NullCallback()
        cb.on_file("sizing_function", "/tmp/sizing_function.npz")


class TestLoggingCallback:
    def test_implements_protocol(self):
        assert isinstance(LoggingCallback(), SizingCallback)

    def test_on_status_logs(self, caplog):
        cb = LoggingCallback()
        with caplog.at_level(logging.INFO):
            cb.on_status("grading")
        assert "status: grading" in caplog.text

    def test_on_status_kwargs(self, caplog):
        cb = LoggingCallback()
        with caplog.at_level(logging.INFO):
            cb.on_status("building channel layer", channels=3)
        assert "'channels': 3" in caplog.text

    def test_on_metric_logs(self, caplog):
        cb = LoggingCallback()
        with caplog.at_level(logging.INFO):
            cb.on_metric("timestep_s", 2.5)
        assert "timestep_s = 2.5" in caplog.text

    def test_on_file_logs(self, caplog):
        cb = LoggingCallback()
        with caplog.at_level(logging.INFO):
            cb.on_file("summary", "/tmp/sizing_summary.json")
        assert "summary -> /tmp/sizing_summary.json" in caplog.text

    def test_uses_given_logger(self, caplog):
        custom = logging.getLogger("coastal_sizing.custom")
        cb = LoggingCallback(custom)
        with caplog.at_level(logging.INFO, logger="coastal_sizing.custom"):
            cb.on_metric("grid_nodes", 100)
        assert caplog.records[-1].name == "coastal_sizing.custom"


class TestProtocolConformance:
    def test_duck_typed_object(self):
        class Recorder:
            def on_status(self, status, **kwargs):
                pass

            def on_metric(self, key, value):
                pass

            def on_file(self, key, filepath):
                pass

        assert isinstance(Recorder(), SizingCallback)

    def test_incomplete_object(self):
        class StatusOnly:
            def on_status(self, status, **kwargs):
                pass

        assert not isinstance(StatusOnly(), SizingCallback)
