import os
import logging
from contextlib import contextmanager
from selenium import webdriver
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.support.events import EventFiringWebDriver
from selenium.webdriver.support.ui import WebDriverWait
from selenium.common.exceptions import TimeoutException, WebDriverException
from webdriver_manager.chrome import ChromeDriverManager

from quizbot.browser.events import CONSOLE_LOGGER_NAME, CONSOLE_TAG, BrowserConsoleHandler, SessionListener
from quizbot.config import LogLevelFilter
from quizbot.exceptions import BrowserClosedError, NavigationError

logger = logging.getLogger(__name__)
console_logger = logging.getLogger(CONSOLE_LOGGER_NAME)

PAGE_LOAD_TIMEOUT = 30


def create_driver(config):
    """Start a visible Chrome so a human can watch and step in"""
    logger.info("🌐 Initializing browser...")

    chrome_options = Options()
    chrome_options.add_argument("--window-size=1280,900")
    chrome_options.add_argument("--disable-blink-features=AutomationControlled")
    chrome_options.add_experimental_option("excludeSwitches", ["enable-automation"])
    # Keep in-page console messages so they can be relayed to our own log
    chrome_options.set_capability("goog:loggingPrefs", {"browser": "ALL"})

    service = Service(ChromeDriverManager().install())
    driver = webdriver.Chrome(service=service, options=chrome_options)
    logger.info("✅ Browser initialized")
    return driver


class BrowserSession:
    """One browser and its page, closed at most once"""

    def __init__(self, driver, config):
        self.config = config
        self.raw_driver = driver
        self.closed = False
        self.console_handler = BrowserConsoleHandler(driver)
        self.driver = EventFiringWebDriver(driver, SessionListener(self))

    def relay_console(self):
        """Surface new in-page console messages on our log stream"""
        if self.closed:
            return
        try:
            entries = self.raw_driver.get_log("browser")
        except WebDriverException as e:
            logger.debug(f"Could not read browser console: {str(e)}")
            return

        for entry in entries:
            message = entry.get("message", "")
            if CONSOLE_TAG in message:
                continue
            console_logger.info(f"[Browser Console] {entry.get('level', 'INFO').lower()}: {message}")

    def navigate(self, url):
        """Load ``url`` and wait for the document to finish loading"""
        self.driver.get(url)
        try:
            WebDriverWait(self.driver, PAGE_LOAD_TIMEOUT, poll_frequency=self.config.timings.poll_interval).until(
                lambda d: d.execute_script("return document.readyState") == "complete"
            )
        except TimeoutException as e:
            raise NavigationError(f"Page {url} did not finish loading") from e
        logger.info(f"Navigated to quiz page: {self.driver.current_url}")

    def reload(self):
        self.driver.refresh()

    def save_screenshot(self, filename):
        """Best-effort screenshot under the log directory"""
        if self.closed:
            return None
        path = os.path.join(self.config.log_dir, filename)
        try:
            os.makedirs(self.config.log_dir, exist_ok=True)
            self.raw_driver.save_screenshot(path)
            logger.info(f"Saved screenshot to {path}")
            return path
        except (OSError, WebDriverException) as e:
            logger.warning(f"Could not save screenshot {filename}: {str(e)}")
            return None

    def attach_console(self, log_level):
        """Start echoing quizbot log records into the page"""
        self.console_handler.addFilter(LogLevelFilter(log_level))
        logging.getLogger().addHandler(self.console_handler)

    def detach_console(self):
        logging.getLogger().removeHandler(self.console_handler)

    def close(self):
        """Quit the browser; returns False if quitting failed"""
        if self.closed:
            return True
        self.closed = True
        # No page to echo into once quit starts
        self.detach_console()
        try:
            self.raw_driver.quit()
            logger.info("Browser closed successfully")
            return True
        except Exception as e:
            logger.error(f"Error closing browser: {str(e)}")
            return False

    def handle_window_closed(self):
        """The user closed the window: shut down and report the exit code"""
        if self.closed:
            raise BrowserClosedError(exit_code=0)
        self.detach_console()
        logger.info("Browser window was closed. Cleaning up...")
        exit_code = 0 if self.close() else 1
        raise BrowserClosedError(exit_code=exit_code)


@contextmanager
def open_session(config, driver_factory=create_driver):
    """Yield a BrowserSession, closing it on every exit path"""
    session = BrowserSession(driver_factory(config), config)
    session.attach_console(config.log_level)
    try:
        yield session
    finally:
        session.detach_console()
        session.close()
