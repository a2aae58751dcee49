import sys
import signal
import logging

from quizbot.ai.clients import OllamaClient, create_client, ensure_ollama_running
from quizbot.browser.browser_manager import open_session
from quizbot.config import load_config, setup_logging
from quizbot.exceptions import BrowserClosedError, ConfigError
from quizbot.handlers.auth_handler import login_to_quiz
from quizbot.quiz.quiz_handler import QuizRunner

logger = logging.getLogger(__name__)


def run_quiz_bot(config, client=None, session_factory=open_session):
    """Log in, wait for the quiz and answer questions until it is over"""
    if client is None:
        client = create_client(config.ai)
    if isinstance(client, OllamaClient):
        ensure_ollama_running(client, autostart=config.ai.ollama_autostart)

    with session_factory(config) as session:
        session.navigate(config.quiz_url)
        login_to_quiz(session, config.credentials, config.selectors, config.timings)
        QuizRunner(session, client, config).run()
    return 0


def _handle_termination(signum, frame):
    logger.info("Received SIGTERM. Cleaning up...")
    # SystemExit unwinds through open_session, which closes the browser
    raise SystemExit(0)


def main():
    try:
        config = load_config()
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    log_filename = setup_logging(config)
    logger.info(f"Log file: {log_filename}")
    signal.signal(signal.SIGTERM, _handle_termination)

    try:
        return run_quiz_bot(config)
    except BrowserClosedError as e:
        return e.exit_code
    except KeyboardInterrupt:
        logger.info("Received SIGINT. Cleaning up...")
        return 0
    except Exception as e:
        logger.exception(f"Error: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
