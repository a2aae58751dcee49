import logging
from selenium.common.exceptions import (
    InvalidSessionIdException,
    NoSuchWindowException,
    WebDriverException,
)
from selenium.webdriver.support.events import AbstractEventListener

CONSOLE_LOGGER_NAME = "quizbot.browser.console"
CONSOLE_TAG = "[Quiz Bot]:"

# Exceptions chromedriver raises once the user has closed the window
WINDOW_CLOSED_ERRORS = (NoSuchWindowException, InvalidSessionIdException)


class SessionListener(AbstractEventListener):
    """
    Event subscriptions for one browser session.

    Every wrapped driver call relays pending browser console messages, and a
    call that fails because the window is gone hands over to the session's
    shutdown handling.
    """

    def __init__(self, session):
        self.session = session

    def after_navigate_to(self, url, driver):
        self.session.relay_console()

    def after_find(self, by, value, driver):
        self.session.relay_console()

    def after_click(self, element, driver):
        self.session.relay_console()

    def after_change_value_of(self, element, driver):
        self.session.relay_console()

    def on_exception(self, exception, driver):
        if isinstance(exception, WINDOW_CLOSED_ERRORS):
            self.session.handle_window_closed()


class BrowserConsoleHandler(logging.Handler):
    """Echo quizbot log records into the page's own console"""

    def __init__(self, driver, level=logging.NOTSET):
        super().__init__(level)
        self.driver = driver
        self.broken = False
        self._emitting = False
        # Third-party records (urllib3 retries among them) would feed back into the driver
        self.addFilter(lambda record: record.name.startswith("quizbot") and record.name != CONSOLE_LOGGER_NAME)

    def emit(self, record):
        if self.broken or self._emitting:
            return
        self._emitting = True
        try:
            message = self.format(record)
            method = "error" if record.levelno >= logging.ERROR else "log"
            self.driver.execute_script(
                f"console.{method}(arguments[0], arguments[1]);", CONSOLE_TAG, message
            )
        except WebDriverException:
            # Page may be gone or mid-navigation
            pass
        except Exception:
            # chromedriver itself is unreachable, stop echoing
            self.broken = True
            self.handleError(record)
        finally:
            self._emitting = False
