import logging
from bs4 import BeautifulSoup
from selenium.webdriver.common.by import By

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 500


def describe_question_area(page_source, selectors):
    """
    Summarize the page after a question wait timed out.

    Returns a dict with a short preview of the page source, whether the
    question container is in the DOM at all, and its HTML when it is.
    """
    summary = {
        "preview": page_source[:PREVIEW_LENGTH] + ("..." if len(page_source) > PREVIEW_LENGTH else ""),
        "question_pane_found": None,
        "question_pane_html": None,
    }

    by, value = selectors.question_pane
    if by != By.CSS_SELECTOR:
        # BeautifulSoup only understands CSS selectors
        return summary

    soup = BeautifulSoup(page_source, "html.parser")
    pane = soup.select_one(value)
    summary["question_pane_found"] = pane is not None
    if pane is not None:
        summary["question_pane_html"] = str(pane)
    return summary


def log_timeout_diagnostics(page_source, selectors):
    summary = describe_question_area(page_source, selectors)
    logger.info("Current page content structure:")
    logger.info(summary["preview"])

    if summary["question_pane_found"] is None:
        logger.info("Question pane selector is not CSS, skipping DOM check")
    elif summary["question_pane_found"]:
        logger.info("Question pane exists but might not be visible")
        logger.info(f"Question pane HTML: {summary['question_pane_html']}")
    else:
        logger.info("Question pane not found in DOM")
    return summary
