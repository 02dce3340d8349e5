"""
Tests for queue-based logging and actor stamping.
"""
import logging
import logging.handlers
from types import SimpleNamespace

from flask import Flask, g

from app.logging_config import ActorFilter, QueueLogging


def make_record(message="hello"):
    return logging.LogRecord("post_limit.test", logging.INFO, __file__, 1, message, None, None)


class TestActorFilter:
    def test_outside_request(self):
        record = make_record()
        assert ActorFilter().filter(record) is True
        assert record.actor == "-"

    def test_inside_request(self):
        app = Flask(__name__)
        with app.test_request_context("/"):
            g.request_scope = SimpleNamespace(actor_id="alice")
            record = make_record()
            ActorFilter().filter(record)
        assert record.actor == "alice"

    def test_request_without_scope(self):
        app = Flask(__name__)
        with app.test_request_context("/"):
            record = make_record()
            ActorFilter().filter(record)
        assert record.actor == "-"


class TestQueueLogging:
    def test_writes_log_file_and_detaches(self, tmp_path):
        """Test that records reach the log file and stop() leaves the root logger clean."""
        log_file = tmp_path / "logs" / "app.log"
        queue_logging = QueueLogging()

        queue_logging.start(log_file=str(log_file), quiet_loggers=["noisy.lib"])
        try:
            assert queue_logging.running
            assert logging.getLogger("noisy.lib").level == logging.WARNING
            logging.getLogger("post_limit.test").info("limit reached for alice")
        finally:
            queue_logging.stop()

        assert not queue_logging.running
        assert not any(
            isinstance(handler, logging.handlers.QueueHandler) for handler in logging.getLogger().handlers
        )
        content = log_file.read_text(encoding="utf-8")
        assert "limit reached for alice" in content
        assert "[-]" in content

    def test_start_twice_keeps_one_listener(self, tmp_path):
        queue_logging = QueueLogging()
        queue_logging.start()
        queue_logging.start(debug=True)
        try:
            queue_handlers = [
                handler for handler in logging.getLogger().handlers
                if isinstance(handler, logging.handlers.QueueHandler)
            ]
            assert len(queue_handlers) == 1
            assert logging.getLogger().level == logging.DEBUG
        finally:
            queue_logging.stop()
