import logging

from assistant_admin.utils.logger import setup_logger


def test_setup_logger_configures_package_tree_once():
    name = "assistant_admin_logger_check"
    logger = setup_logger(level="debug", name=name)
    try:
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        handlers = list(logger.handlers)
        assert handlers

        again = setup_logger(level="WARNING", name=name)
        assert again is logger
        assert logger.handlers == handlers
        assert logger.level == logging.WARNING
        assert logging.getLogger(name + ".store").getEffectiveLevel() == logging.WARNING
    finally:
        logger.handlers.clear()
