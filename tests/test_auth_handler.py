import pytest
from selenium.common.exceptions import TimeoutException

from conftest import FAST_TIMINGS, FakeElement, QuizSite
from quizbot.config import Credentials
from quizbot.handlers.auth_handler import login_to_quiz

CREDENTIALS = Credentials(email="student@example.com", pin="4321")


def test_login_runs_steps_in_order(driver, session, selectors):
    QuizSite(driver, selectors, [])

    login_to_quiz(session, CREDENTIALS, selectors, FAST_TIMINGS)

    assert driver.clicked == ["enter", "enter"]
    assert driver.find_element(*selectors.email_input).value == "student@example.com"
    assert driver.find_element(*selectors.pin_input).value == "4321"


def test_login_clears_prefilled_fields(driver, session, selectors):
    QuizSite(driver, selectors, [])
    driver.find_element(*selectors.email_input).value = "old@example.com"

    login_to_quiz(session, CREDENTIALS, selectors, FAST_TIMINGS)

    assert driver.find_element(*selectors.email_input).value == "student@example.com"


def test_login_aborts_when_enter_button_missing(driver, session, selectors):
    email = FakeElement(name="email")
    driver.add(selectors.email_input, email)

    with pytest.raises(TimeoutException):
        login_to_quiz(session, CREDENTIALS, selectors, FAST_TIMINGS)
    assert email.value == ""


def test_login_aborts_when_pin_field_missing(driver, session, selectors):
    QuizSite(driver, selectors, [])
    driver.remove(selectors.pin_input)

    with pytest.raises(TimeoutException):
        login_to_quiz(session, CREDENTIALS, selectors, FAST_TIMINGS)

    # Email was filled but the second Enter click never happened
    assert driver.find_element(*selectors.email_input).value == "student@example.com"
    assert driver.clicked == ["enter"]
