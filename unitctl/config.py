import logging

from systemd.journal import JournalHandler


def setup_logger(level: int = logging.INFO) -> None:
    """Configure logging to use systemd journal.

    Args:
        level: Minimum level of records sent to the journal
    """
    app_logger = logging.getLogger('unitctl')
    app_logger.setLevel(level)

    journal_handler = JournalHandler(SYSLOG_IDENTIFIER='unitctl')

    app_logger.addHandler(journal_handler)
