import logging

from gemini_afc.logging_utils.fc_debug import FCDebugLogger, FCModule, get_fc_logger


class TestFCDebugLogger:
    def test_prefixes_module(self, caplog):
        fc = FCDebugLogger(logging.getLogger("afc-test"), enabled=True)
        with caplog.at_level(logging.DEBUG, logger="afc-test"):
            fc.debug(FCModule.EXTRACT, "found 2 calls")
            fc.error(FCModule.LOOP, "stopped")
        assert [record.getMessage() for record in caplog.records] == [
            "[FC:extract] found 2 calls",
            "[FC:loop] stopped",
        ]
        assert caplog.records[1].levelno == logging.ERROR

    def test_disabled_is_silent(self, caplog):
        fc = FCDebugLogger(logging.getLogger("afc-test"), enabled=False)
        with caplog.at_level(logging.DEBUG, logger="afc-test"):
            fc.warning(FCModule.EXECUTE, "ignored")
        assert caplog.records == []

    def test_shared_instance(self):
        assert get_fc_logger() is get_fc_logger()
