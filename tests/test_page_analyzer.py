from dataclasses import replace

from selenium.webdriver.common.by import By

from quizbot.handlers.page_analyzer import describe_question_area, log_timeout_diagnostics
from quizbot.quiz.selectors import LAYOUTS

SELECTORS = LAYOUTS["default"]


def test_hidden_question_pane_is_reported():
    source = "<html><body><div class='questionPane' style='display:none'><div class='questionText'>Q?</div></div></body></html>"

    summary = describe_question_area(source, SELECTORS)

    assert summary["question_pane_found"] is True
    assert "questionText" in summary["question_pane_html"]


def test_missing_question_pane(caplog):
    source = "<html><body><div class='lobby'>" + "x" * 600 + "</div></body></html>"

    with caplog.at_level("INFO"):
        summary = log_timeout_diagnostics(source, SELECTORS)

    assert summary["question_pane_found"] is False
    assert summary["preview"].endswith("...")
    assert len(summary["preview"]) == 503
    assert "Question pane not found in DOM" in caplog.text


def test_xpath_question_pane_skips_dom_check():
    selectors = replace(SELECTORS, question_pane=(By.XPATH, "//div[@id='q']"))

    summary = describe_question_area("<html></html>", selectors)

    assert summary["question_pane_found"] is None
