import os
import sys
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from dotenv import load_dotenv

from quizbot.exceptions import ConfigError
from quizbot.quiz.selectors import LAYOUTS, SiteSelectors, load_selectors

# Log levels
ALL_LOGS = "ALL_LOGS"   # Log everything
AI_LOGS = "AI_LOGS"     # Log only AI interactions
NO_LOGS = "NO_LOGS"     # Log nothing
LOG_LEVELS = (ALL_LOGS, AI_LOGS, NO_LOGS)

# AI backends
OLLAMA = "OLLAMA"
CHATGPT = "CHATGPT"
AI_MODELS = (OLLAMA, CHATGPT)

# Question wait timeout policies
RELOAD = "reload"
FINISH = "finish"
TIMEOUT_POLICIES = (RELOAD, FINISH)

AI_LOGGER_NAME = "quizbot.ai"

REQUIRED_VARS = ("QUIZ_URL", "QUIZ_EMAIL", "QUIZ_PINCODE")

DEFAULT_LOG_DIR = os.path.join(os.getcwd(), "logs")


@dataclass(frozen=True)
class Credentials:
    email: str
    pin: str = field(repr=False)


@dataclass(frozen=True)
class AISettings:
    model: str = OLLAMA
    openai_api_key: str = field(default=None, repr=False)
    openai_model: str = "gpt-4o-mini"
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "mistral"
    ollama_autostart: bool = True


@dataclass(frozen=True)
class Timings:
    """Waits and settle delays, in seconds"""
    element_timeout: float = 50
    login_timeout: float = 5
    start_timeout: float = 0
    login_settle: float = 2
    retry_pause: float = 1
    submit_settle: float = 3
    skip_pause: float = 1
    reload_settle: float = 5
    poll_interval: float = 0.5


@dataclass(frozen=True)
class RunConfig:
    quiz_url: str
    credentials: Credentials
    ai: AISettings = field(default_factory=AISettings)
    log_level: str = ALL_LOGS
    selectors: SiteSelectors = field(default_factory=lambda: LAYOUTS["default"])
    timeout_policy: str = RELOAD
    max_reloads: int = 3
    timings: Timings = field(default_factory=Timings)
    log_dir: str = DEFAULT_LOG_DIR


def _parse_bool(name, value):
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Invalid {name}. Must be true or false, got {value!r}")


def _parse_number(name, value, cast=float):
    try:
        number = cast(value)
    except ValueError:
        raise ConfigError(f"Invalid {name}. Must be a number, got {value!r}") from None
    if number < 0:
        raise ConfigError(f"Invalid {name}. Must not be negative, got {value!r}")
    return number


def _choice(env, name, choices, default):
    value = env.get(name) or default
    if value not in choices:
        raise ConfigError(f"Invalid {name}. Must be one of: {', '.join(choices)}")
    return value


def load_ai_settings(env=None):
    """Read the inference backend settings from the environment"""
    if env is None:
        load_dotenv()
        env = os.environ

    model = _choice(env, "AI_MODEL", AI_MODELS, OLLAMA)
    api_key = env.get("OPENAI_API_KEY") or None

    # Validate OpenAI API key if ChatGPT is selected
    if model == CHATGPT and not api_key:
        raise ConfigError("OPENAI_API_KEY is required when using CHATGPT model")

    defaults = AISettings()
    return AISettings(
        model=model,
        openai_api_key=api_key,
        openai_model=env.get("OPENAI_MODEL") or defaults.openai_model,
        ollama_host=env.get("OLLAMA_HOST") or defaults.ollama_host,
        ollama_model=env.get("OLLAMA_MODEL") or defaults.ollama_model,
        ollama_autostart=_parse_bool("OLLAMA_AUTOSTART", env.get("OLLAMA_AUTOSTART") or "true"),
    )


def load_config(env=None):
    """Build the run configuration, failing before any browser action"""
    if env is None:
        load_dotenv()
        env = os.environ

    missing = [name for name in REQUIRED_VARS if not env.get(name)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    log_level = _choice(env, "LOG_LEVEL", LOG_LEVELS, ALL_LOGS)
    timeout_policy = _choice(env, "QUIZ_TIMEOUT_POLICY", TIMEOUT_POLICIES, RELOAD)

    timings = Timings()
    if env.get("QUIZ_ELEMENT_TIMEOUT"):
        element_timeout = _parse_number("QUIZ_ELEMENT_TIMEOUT", env["QUIZ_ELEMENT_TIMEOUT"])
        if element_timeout == 0:
            raise ConfigError("Invalid QUIZ_ELEMENT_TIMEOUT. Must be greater than zero")
        timings = replace(timings, element_timeout=element_timeout)
    if env.get("QUIZ_START_TIMEOUT"):
        start_timeout = _parse_number("QUIZ_START_TIMEOUT", env["QUIZ_START_TIMEOUT"])
        timings = replace(timings, start_timeout=start_timeout)

    max_reloads = 3
    if env.get("QUIZ_MAX_RELOADS"):
        max_reloads = _parse_number("QUIZ_MAX_RELOADS", env["QUIZ_MAX_RELOADS"], cast=int)

    selectors = load_selectors(env.get("QUIZ_LAYOUT") or "default", env.get("QUIZ_SELECTORS_FILE"))

    return RunConfig(
        quiz_url=env["QUIZ_URL"],
        credentials=Credentials(email=env["QUIZ_EMAIL"], pin=env["QUIZ_PINCODE"]),
        ai=load_ai_settings(env),
        log_level=log_level,
        selectors=selectors,
        timeout_policy=timeout_policy,
        max_reloads=max_reloads,
        timings=timings,
        log_dir=env.get("QUIZ_LOG_DIR") or DEFAULT_LOG_DIR,
    )


class LogLevelFilter(logging.Filter):
    """Gate records by the configured LOG_LEVEL category"""

    def __init__(self, log_level):
        super().__init__()
        self.log_level = log_level

    def filter(self, record):
        if self.log_level == NO_LOGS:
            return False
        if self.log_level == AI_LOGS:
            return record.name == AI_LOGGER_NAME or record.name.startswith(AI_LOGGER_NAME + ".")
        return True


# Configure logging
def setup_logging(config):
    os.makedirs(config.log_dir, exist_ok=True)
    log_filename = os.path.join(config.log_dir, f"quizbot_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log")
    level_filter = LogLevelFilter(config.log_level)

    file_handler = logging.FileHandler(log_filename)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', datefmt='%Y-%m-%d %H:%M:%S'))
    file_handler.addFilter(level_filter)

    # Console mirrors the file without timestamps
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter('%(message)s'))
    console.addFilter(level_filter)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(file_handler)
    root.addHandler(console)

    logging.info("Starting quiz bot")
    return log_filename
