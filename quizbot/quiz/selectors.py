"""
Site-specific element locators for the quiz portal.

Every locator is a Selenium ``(By, value)`` pair. The quiz state machine only
ever refers to these fields by name, so supporting a new page layout means
adding a ``SiteSelectors`` entry (or a JSON override file), not editing the
control flow.
"""
import json
from dataclasses import dataclass, fields, replace
from selenium.webdriver.common.by import By

from quizbot.exceptions import ConfigError

LOCATOR_STRATEGIES = {
    By.CSS_SELECTOR, By.XPATH, By.ID, By.NAME, By.CLASS_NAME,
    By.TAG_NAME, By.LINK_TEXT, By.PARTIAL_LINK_TEXT,
}


def _button_with_label(colour, label):
    return (
        By.XPATH,
        f"//div[contains(concat(' ', normalize-space(@class), ' '), ' button ') and "
        f"contains(concat(' ', normalize-space(@class), ' '), ' {colour} ') and "
        f".//div[contains(@class, 'buttonText') and contains(normalize-space(.), '{label}')]]",
    )


def _any_button_with_label(label):
    return (
        By.XPATH,
        f"//div[contains(concat(' ', normalize-space(@class), ' '), ' button ') and "
        f".//div[contains(@class, 'buttonText') and contains(normalize-space(.), '{label}')]]",
    )


@dataclass(frozen=True)
class SiteSelectors:
    enter_button: tuple
    enter_label: tuple
    email_input: tuple
    pin_input: tuple
    join_button: tuple
    join_label: tuple
    question_pane: tuple
    question_text: tuple
    answer_pane: tuple
    answer_text: tuple
    answer_option: tuple
    submit_button: tuple
    submit_label: tuple

    def option(self, index):
        """Locator for the answer option at 1-based ordinal ``index``"""
        by, template = self.answer_option
        return by, template.format(index=index)


LAYOUTS = {
    # Blue login/join buttons, yellow submit button
    "default": SiteSelectors(
        enter_button=(By.CSS_SELECTOR, "div.button.bg-blue"),
        enter_label=(By.CSS_SELECTOR, "div.button.bg-blue div.buttonText"),
        email_input=(By.CSS_SELECTOR, 'input[name="email"]'),
        pin_input=(By.CSS_SELECTOR, 'input[name="pin"]'),
        join_button=_button_with_label("bg-blue", "Join"),
        join_label=_button_with_label("bg-blue", "Join"),
        question_pane=(By.CSS_SELECTOR, "div.questionPane"),
        question_text=(By.CSS_SELECTOR, "div.questionPane div.questionText"),
        answer_pane=(By.CSS_SELECTOR, "div.answerPane"),
        answer_text=(By.CSS_SELECTOR, "div.answerPane div.answerText"),
        answer_option=(By.CSS_SELECTOR, "div.answerPane div.answer:nth-child({index})"),
        submit_button=(By.CSS_SELECTOR, "div.button.bg-yellow"),
        submit_label=_button_with_label("bg-yellow", "Submit"),
    ),
    # Buttons located by their label only, whatever their colour
    "text-buttons": SiteSelectors(
        enter_button=_any_button_with_label("Enter"),
        enter_label=_any_button_with_label("Enter"),
        email_input=(By.CSS_SELECTOR, 'input[name="email"]'),
        pin_input=(By.CSS_SELECTOR, 'input[name="pin"]'),
        join_button=_any_button_with_label("Join"),
        join_label=_any_button_with_label("Join"),
        question_pane=(By.CSS_SELECTOR, "div.questionPane"),
        question_text=(By.CSS_SELECTOR, "div.questionPane div.questionText"),
        answer_pane=(By.CSS_SELECTOR, "div.answerPane"),
        answer_text=(By.CSS_SELECTOR, "div.answerPane div.answerText"),
        answer_option=(By.CSS_SELECTOR, "div.answerPane div.answer:nth-child({index})"),
        submit_button=_any_button_with_label("Submit"),
        submit_label=_any_button_with_label("Submit"),
    ),
}


def _parse_locator(name, raw):
    if isinstance(raw, dict):
        by, value = raw.get("by"), raw.get("value")
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        by, value = raw
    else:
        raise ConfigError(f"Selector '{name}' must be [strategy, value] or {{\"by\": ..., \"value\": ...}}")

    if by not in LOCATOR_STRATEGIES:
        raise ConfigError(f"Selector '{name}' uses unknown strategy {by!r}")
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Selector '{name}' needs a non-empty value")
    return by, value


def apply_overrides(base, overrides):
    """Return ``base`` with the locators named in ``overrides`` replaced"""
    known = {f.name for f in fields(SiteSelectors)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigError(f"Unknown selector names: {', '.join(unknown)}")

    parsed = {name: _parse_locator(name, raw) for name, raw in overrides.items()}
    if "answer_option" in parsed and "{index}" not in parsed["answer_option"][1]:
        raise ConfigError("Selector 'answer_option' must contain an {index} placeholder")
    return replace(base, **parsed)


def load_selectors(layout="default", path=None):
    """Pick a built-in layout and layer an optional JSON override file on top"""
    if layout not in LAYOUTS:
        raise ConfigError(f"Invalid QUIZ_LAYOUT. Must be one of: {', '.join(LAYOUTS)}")
    selectors = LAYOUTS[layout]

    if path:
        try:
            with open(path, encoding="utf-8") as f:
                overrides = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Could not read selector file {path}: {e}") from e
        if not isinstance(overrides, dict):
            raise ConfigError(f"Selector file {path} must contain a JSON object")
        selectors = apply_overrides(selectors, overrides)

    return selectors
