import logging
from dataclasses import dataclass, field

from quizbot.exceptions import NoOptionsError

logger = logging.getLogger(__name__)


@dataclass
class Question:
    text: str
    options: list = field(default_factory=list)


def _text_content(element):
    return (element.get_attribute("textContent") or "").strip()


def extract_question_text(driver, selectors):
    return _text_content(driver.find_element(*selectors.question_text))


def extract_options(driver, selectors):
    """Option texts in DOM order; position i + 1 is the option's ordinal"""
    return [_text_content(el) for el in driver.find_elements(*selectors.answer_text)]


def extract_question(driver, selectors):
    """Scrape the visible question and its options"""
    text = extract_question_text(driver, selectors)
    logger.info("Question text extracted")

    options = extract_options(driver, selectors)
    if not options:
        raise NoOptionsError("No answer options found")

    logger.info(f"Found {len(options)} answer options")
    return Question(text=text, options=options)


def question_html(driver, selectors):
    """Raw outerHTML of the question container, for debugging"""
    return driver.find_element(*selectors.question_pane).get_attribute("outerHTML") or ""
