import logging

from tele_station.logger import setup_logging


def test_setup_logging_quiets_http_clients(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    monkeypatch.setattr(root, "level", root.level)

    setup_logging()

    assert root.level == logging.DEBUG
    for name in ("urllib3", "httpx", "httpcore", "telegram"):
        assert logging.getLogger(name).level == logging.WARNING
