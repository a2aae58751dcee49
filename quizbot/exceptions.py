"""Custom exceptions for the quiz bot."""


class QuizBotError(Exception):
    """Base exception for quiz bot errors."""

    pass


class ConfigError(QuizBotError):
    """Missing or invalid configuration."""

    pass


class BackendUnavailableError(QuizBotError):
    """The local inference server could not be reached or started."""

    pass


class NavigationError(QuizBotError):
    """The quiz page did not load."""

    pass


class ElementNotFoundError(QuizBotError):
    """An element never became available after every retry attempt."""

    def __init__(self, locator, attempts):
        self.locator = locator
        self.attempts = attempts
        super().__init__(f'Failed to find element "{locator[1]}" after {attempts} attempts')


class NoOptionsError(QuizBotError):
    """A question was found without any answer options."""

    pass


class AnswerOutOfRangeError(QuizBotError):
    """The chosen answer does not map to any option on the page."""

    def __init__(self, answer, option_count):
        self.answer = answer
        self.option_count = option_count
        super().__init__(f"Answer {answer} is outside the range 1-{option_count}")


class BrowserClosedError(QuizBotError):
    """The browser window was closed while the bot was running."""

    def __init__(self, exit_code=0):
        self.exit_code = exit_code
        super().__init__(f"Browser window was closed (exit code {exit_code})")
