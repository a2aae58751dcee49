import time
import logging
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from selenium.common.exceptions import TimeoutException

from quizbot.exceptions import ElementNotFoundError

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


def wait_for_element_with_retry(driver, locator, timings, clickable=False, max_attempts=MAX_ATTEMPTS):
    """
    Wait for ``locator`` to become visible (or clickable), retrying with a
    longer timeout each time: attempt N waits N * element_timeout seconds.

    Raises ElementNotFoundError once every attempt has timed out.
    """
    condition = EC.element_to_be_clickable if clickable else EC.visibility_of_element_located
    last_error = None

    for attempt in range(1, max_attempts + 1):
        logger.info(f'Attempting to find element "{locator[1]}" (attempt {attempt}/{max_attempts})')
        try:
            element = WebDriverWait(
                driver, timings.element_timeout * attempt, poll_frequency=timings.poll_interval
            ).until(condition(locator))
            logger.info(f'Successfully found element "{locator[1]}" on attempt {attempt}')
            return element
        except TimeoutException as e:
            last_error = e
            if attempt < max_attempts:
                logger.info(f"Attempt {attempt} failed, retrying...")
                time.sleep(timings.retry_pause)

    raise ElementNotFoundError(locator, max_attempts) from last_error


def wait_for_quiz_start(driver, selectors, timings, slice_seconds=60):
    """Block until the Join control shows up, then click it"""
    logger.info("Waiting for quiz to start (Join button to appear)...")
    waited = 0
    while True:
        wait_seconds = slice_seconds
        if timings.start_timeout:
            wait_seconds = min(slice_seconds, timings.start_timeout - waited)
        try:
            WebDriverWait(driver, wait_seconds, poll_frequency=timings.poll_interval).until(
                EC.visibility_of_element_located(selectors.join_label)
            )
            break
        except TimeoutException:
            waited += wait_seconds
            if timings.start_timeout and waited >= timings.start_timeout:
                raise ElementNotFoundError(selectors.join_label, 1) from None
            logger.info(f"Still waiting for the quiz to start ({int(waited)}s)...")

    logger.info("Join button found! Quiz is starting...")
    driver.find_element(*selectors.join_button).click()
    logger.info("Clicked Join button")
