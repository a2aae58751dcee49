import json
import time
import logging
from selenium.common.exceptions import WebDriverException

from quizbot.config import FINISH
from quizbot.exceptions import (
    AnswerOutOfRangeError,
    BrowserClosedError,
    ElementNotFoundError,
    QuizBotError,
)
from quizbot.handlers.page_analyzer import log_timeout_diagnostics
from quizbot.quiz.quiz_elements import wait_for_element_with_retry, wait_for_quiz_start
from quizbot.quiz.quiz_extractors import extract_question, question_html

logger = logging.getLogger(__name__)
ai_logger = logging.getLogger("quizbot.ai.quiz")


class QuizRunner:
    """
    Drives the question loop:

        waiting for question -> extracting -> awaiting answer -> submitting

    and back, until no more questions show up or something fatal happens.
    A question wait that times out goes through the configured timeout policy;
    a failure while clicking the answer or submit control ends the run.
    """

    def __init__(self, session, client, config):
        self.session = session
        self.client = client
        self.config = config
        self.selectors = config.selectors
        self.timings = config.timings

    @property
    def driver(self):
        return self.session.driver

    def run(self):
        """Answer questions until the quiz is over; returns how many were submitted"""
        wait_for_quiz_start(self.driver, self.selectors, self.timings)
        try:
            submitted = self._answer_questions()
        except BrowserClosedError:
            raise
        except (QuizBotError, WebDriverException) as e:
            logger.error(f"Error during quiz: {e}")
            self.session.save_screenshot("quiz-error.png")
            raise

        logger.info(f"Quiz loop ended after {submitted} submitted answers")
        return submitted

    def _answer_questions(self):
        submitted = 0
        failed_waits = 0
        while True:
            try:
                question = self.next_question()
            except ElementNotFoundError as e:
                failed_waits += 1
                if not self.recover_from_timeout(e, failed_waits):
                    logger.info("No more questions found, quiz finished")
                    break
                continue

            failed_waits = 0
            ai_logger.info(f"Question: {question.text}")
            ai_logger.info(f"Options: {json.dumps(question.options)}")
            ai_logger.info("Sending to AI for analysis...")

            answer = self.client.get_answer(question.text, question.options)
            if answer is None:
                ai_logger.error("Failed to get answer from AI, skipping question")
                time.sleep(self.timings.skip_pause)
                continue

            ai_logger.info(f"AI suggests answer: {answer}")
            self.submit_answer(question, answer)
            submitted += 1

        return submitted

    def next_question(self):
        """Wait for the next question to render and scrape it"""
        logger.info("Waiting for question...")
        wait_for_element_with_retry(self.driver, self.selectors.question_pane, self.timings)
        logger.info("Found question pane")

        wait_for_element_with_retry(self.driver, self.selectors.question_text, self.timings)
        logger.info("Found question text element")

        logger.debug(f"Raw question HTML: {question_html(self.driver, self.selectors)}")
        self.session.save_screenshot("debug-question.png")

        logger.info("Waiting for answer pane...")
        wait_for_element_with_retry(self.driver, self.selectors.answer_pane, self.timings)
        logger.info("Found answer pane")

        return extract_question(self.driver, self.selectors)

    def recover_from_timeout(self, error, failed_waits):
        """
        Apply the timeout policy. Returns True when the page was reloaded and
        the loop should wait for a question again, False when the quiz is over.
        """
        logger.info(f"Timeout error: {error}")
        if self.config.timeout_policy == FINISH:
            return False

        max_reloads = self.config.max_reloads
        if max_reloads and failed_waits > max_reloads:
            logger.info(f"Giving up after {max_reloads} reload attempts without a question")
            return False

        self.session.save_screenshot("timeout-error.png")
        log_timeout_diagnostics(self.driver.page_source, self.selectors)

        logger.info("Attempting to recover by refreshing the page...")
        self.session.reload()
        time.sleep(self.timings.reload_settle)
        return True

    def submit_answer(self, question, answer):
        """Click the option at ordinal ``answer`` and then the submit control"""
        try:
            if not 1 <= answer <= len(question.options):
                raise AnswerOutOfRangeError(answer, len(question.options))

            available = [f"{i}: {text}" for i, text in enumerate(question.options, 1)]
            ai_logger.info(f"Available options: {json.dumps(available)}")

            option_locator = self.selectors.option(answer)
            logger.info(f"Attempting to click option with selector: {option_locator[1]}")
            option = wait_for_element_with_retry(self.driver, option_locator, self.timings, clickable=True)
            option.click()
            logger.info("Successfully clicked answer option")

            logger.info(f"Attempting to click submit button with selector: {self.selectors.submit_label[1]}")
            wait_for_element_with_retry(self.driver, self.selectors.submit_label, self.timings)
            self.driver.find_element(*self.selectors.submit_button).click()
            logger.info("Successfully clicked submit button")
        except BrowserClosedError:
            raise
        except (QuizBotError, WebDriverException) as e:
            logger.error(f"Error clicking elements: {e}")
            self.session.save_screenshot("error-screenshot.png")
            raise

        self.session.save_screenshot("success-submission.png")
        # Wait a bit longer before next question
        time.sleep(self.timings.submit_settle)
