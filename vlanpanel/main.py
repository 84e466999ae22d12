import logging
import sys
import threading
from vlanpanel.core.log_setup import setup_logging

APPLICATION_ID = "org.vlanpanel.Panel"

logger = setup_logging(level=logging.INFO)


def global_exception_handler(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.error(
        "Uncaught exception",
        exc_info=(exc_type, exc_value, exc_traceback),
        extra={"thread_name": threading.current_thread().name},
    )


def main():
    sys.excepthook = global_exception_handler
    try:
        from vlanpanel.panel import Panel

        panel = Panel(logger, application_id=APPLICATION_ID)
        return panel.run(sys.argv)
    except Exception:
        logger.critical("Fatal error during initialization", exc_info=True)
        raise


if __name__ == "__main__":
    sys.exit(main())
