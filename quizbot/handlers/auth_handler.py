import time
import logging
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from selenium.common.exceptions import WebDriverException

logger = logging.getLogger(__name__)


def _wait_visible(driver, locator, timings):
    return WebDriverWait(driver, timings.login_timeout, poll_frequency=timings.poll_interval).until(
        EC.visibility_of_element_located(locator)
    )


def _fill(driver, locator, value, timings):
    field = _wait_visible(driver, locator, timings)
    field.clear()
    field.send_keys(value)


def login_to_quiz(session, credentials, selectors, timings):
    """
    Authenticate against the quiz portal.

    Strictly sequential: Enter, email, pin, Enter, then a settle delay for the
    server to set up the session. Any step whose element does not show up in
    time aborts the login and the exception is re-raised unchanged.
    """
    driver = session.driver
    logger.info("🔑 Logging into quiz portal...")

    try:
        _wait_visible(driver, selectors.enter_label, timings)
        driver.find_element(*selectors.enter_button).click()
        logger.info("Clicked Enter button")

        _fill(driver, selectors.email_input, credentials.email, timings)
        logger.info("Entered email")

        _fill(driver, selectors.pin_input, credentials.pin, timings)
        logger.info("Entered pincode")

        _wait_visible(driver, selectors.enter_label, timings)
        driver.find_element(*selectors.enter_button).click()
        logger.info("Submitted login credentials")

        # Wait a moment for the login to complete
        time.sleep(timings.login_settle)
    except WebDriverException as e:
        logger.error(f"Error during login process: {e.msg or type(e).__name__}")
        raise

    logger.info("✅ Login completed successfully")
