import pytest
from selenium.common.exceptions import NoSuchElementException
from selenium.webdriver.chromium.webdriver import ChromiumDriver
from selenium.webdriver.remote.errorhandler import ErrorHandler
from selenium.webdriver.remote.remote_connection import RemoteConnection

from quizbot.config import Credentials, RunConfig, Timings, FINISH
from quizbot.quiz.selectors import LAYOUTS

FAST_TIMINGS = Timings(
    element_timeout=0.01,
    login_timeout=0.01,
    start_timeout=0,
    login_settle=0,
    retry_pause=0,
    submit_settle=0,
    skip_pause=0,
    reload_settle=0,
    poll_interval=0.001,
)


class FakeElement:
    def __init__(self, text="", name=None, displayed=True, enabled=True, html=None, on_click=None):
        self.text = text
        self.name = name or text
        self.displayed = displayed
        self.enabled = enabled
        self.html = html
        self.on_click = on_click
        self.value = ""
        self.clicks = 0
        self.driver = None

    def is_displayed(self):
        return self.displayed

    def is_enabled(self):
        return self.enabled

    def click(self):
        self.clicks += 1
        if self.driver is not None:
            self.driver.clicked.append(self.name)
        if self.on_click:
            self.on_click()

    def clear(self):
        self.value = ""

    def send_keys(self, *values):
        self.value += "".join(values)

    def get_attribute(self, name):
        if name == "textContent":
            return self.text
        if name == "outerHTML":
            return self.html or f"<div>{self.text}</div>"
        return None


class FakeDriver:
    """The slice of the WebDriver API the bot uses, backed by a locator map"""

    def __init__(self):
        self.dom = {}
        self.clicked = []
        self.screenshots = []
        self.scripts = []
        self.refreshes = 0
        self.on_refresh = None
        self.page_source = "<html><body><div class='lobby'>Waiting</div></body></html>"

    def add(self, locator, *elements):
        for element in elements:
            element.driver = self
        self.dom[tuple(locator)] = list(elements)

    def remove(self, locator):
        self.dom.pop(tuple(locator), None)

    def find_element(self, by, value):
        elements = self.dom.get((by, value))
        if not elements:
            raise NoSuchElementException(f"Unable to locate element: {value}")
        return elements[0]

    def find_elements(self, by, value):
        return list(self.dom.get((by, value), []))

    def refresh(self):
        self.refreshes += 1
        if self.on_refresh:
            self.on_refresh()

    def save_screenshot(self, path):
        self.screenshots.append(path)
        return True

    def execute_script(self, script, *args):
        self.scripts.append((script, args))


def dead_chrome_driver(**methods):
    """
    A real Chrome driver object whose chromedriver is no longer listening.

    Any command that reaches the wire fails at the connection level, the way
    it does once chromedriver has exited. ``methods`` replaces individual
    driver methods.
    """
    driver = ChromiumDriver.__new__(ChromiumDriver)
    driver.command_executor = RemoteConnection("http://127.0.0.1:9")
    driver.session_id = "gone"
    driver.error_handler = ErrorHandler()
    driver._websocket_connection = None
    driver._request = None
    for name, method in methods.items():
        setattr(driver, name, method)
    return driver


class FakeSession:
    def __init__(self, driver):
        self.driver = driver
        self.screenshots = []
        self.navigated = []
        self.reloads = 0

    def navigate(self, url):
        self.navigated.append(url)

    def reload(self):
        self.reloads += 1
        self.driver.refresh()

    def save_screenshot(self, filename):
        self.screenshots.append(filename)
        return filename


class ScriptedClient:
    """Answer client returning canned answers, one per call"""

    name = "SCRIPTED"

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = []

    def get_answer(self, question, options):
        self.calls.append((question, list(options)))
        return self.answers.pop(0) if self.answers else None


class QuizSite:
    """
    Wires a FakeDriver up like the quiz portal: login form, Join button, and
    a sequence of questions where Submit moves on to the next one.
    """

    def __init__(self, driver, selectors, questions, with_login=True):
        self.driver = driver
        self.selectors = selectors
        self.questions = questions
        self.current = None

        if with_login:
            driver.add(selectors.enter_label, FakeElement("Enter", name="enter-label"))
            driver.add(selectors.enter_button, FakeElement("Enter", name="enter"))
            driver.add(selectors.email_input, FakeElement(name="email"))
            driver.add(selectors.pin_input, FakeElement(name="pin"))
        driver.add(selectors.join_label, FakeElement("Join", name="join", on_click=lambda: self.show(0)))
        if selectors.join_button != selectors.join_label:
            driver.add(selectors.join_button, FakeElement("Join", name="join", on_click=lambda: self.show(0)))

    def clear_question(self):
        s = self.selectors
        for locator in (s.question_pane, s.question_text, s.answer_pane, s.answer_text,
                        s.submit_label, s.submit_button):
            self.driver.remove(locator)
        for index in range(1, 10):
            self.driver.remove(s.option(index))
        self.driver.page_source = "<html><body><div class='lobby'>Quiz over</div></body></html>"

    def show(self, index):
        self.clear_question()
        self.current = index
        if index >= len(self.questions):
            return

        s = self.selectors
        text, options = self.questions[index]
        html = f"<div class='questionPane'><div class='questionText'>{text}</div></div>"
        self.driver.add(s.question_pane, FakeElement(text, name="question-pane", html=html))
        self.driver.add(s.question_text, FakeElement(f"  {text}\n", name="question-text"))
        self.driver.add(s.answer_pane, FakeElement(name="answer-pane"))
        self.driver.add(s.answer_text, *[FakeElement(option) for option in options])
        for ordinal, option in enumerate(options, 1):
            self.driver.add(s.option(ordinal), FakeElement(option, name=f"option:{option}"))
        self.driver.add(s.submit_label, FakeElement("Submit", name="submit-label"))
        self.driver.add(s.submit_button, FakeElement("Submit", name="submit", on_click=lambda: self.show(index + 1)))
        self.driver.page_source = f"<html><body>{html}</body></html>"


def make_config(**overrides):
    values = dict(
        quiz_url="https://quiz.example.com/play",
        credentials=Credentials(email="student@example.com", pin="1234"),
        timings=FAST_TIMINGS,
        timeout_policy=FINISH,
        log_dir="logs",
    )
    values.update(overrides)
    return RunConfig(**values)


@pytest.fixture
def selectors():
    return LAYOUTS["default"]


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def session(driver):
    return FakeSession(driver)


@pytest.fixture
def config(tmp_path):
    return make_config(log_dir=str(tmp_path / "logs"))


FRANCE = ("What is the capital of France?", ["London", "Paris", "Berlin", "Madrid"])
