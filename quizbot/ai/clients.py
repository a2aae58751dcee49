import json
import time
import logging
import subprocess
import ollama
import openai

from quizbot.ai.prompts import SYSTEM_ROLE, build_prompt, parse_answer
from quizbot.config import CHATGPT
from quizbot.exceptions import BackendUnavailableError

logger = logging.getLogger(__name__)


class AnswerClient:
    """
    Common contract for the inference backends.

    ``get_answer`` never raises: network errors, backend errors and replies
    that are not a usable option number all come back as None.
    """

    name = "AI"

    def get_answer(self, question, options):
        logger.info(f"Using AI Model: {self.name}")
        logger.info(f"Processing question: {question}")
        logger.info(f"Options: {json.dumps(options)}")

        prompt = build_prompt(question, options)
        try:
            reply = self.complete(prompt)
        except Exception as e:
            logger.error(f"Error getting answer from {self.name}: {str(e)}")
            return None

        answer = parse_answer(reply, len(options))
        logger.info(f"AI response: {reply!r} -> {answer}")
        if answer is None:
            logger.warning(f"{self.name} reply is not a number between 1 and {len(options)}")
        return answer

    def complete(self, prompt):
        """Send ``prompt`` and return the raw reply text"""
        raise NotImplementedError


class OllamaClient(AnswerClient):
    """Local generation endpoint (POST /api/generate, non-streaming)"""

    name = "OLLAMA"

    def __init__(self, model="mistral", host="http://localhost:11434", client=None):
        self.model = model
        self.host = host
        self.client = client or ollama.Client(host=host)

    def complete(self, prompt):
        response = self.client.generate(model=self.model, prompt=prompt, stream=False)
        return response["response"].strip()

    def is_running(self):
        try:
            self.client.list()
            return True
        except Exception as e:
            logger.debug(f"Ollama ping failed: {str(e)}")
            return False

    def preload(self):
        """Load the model into memory so the first question is answered promptly"""
        try:
            self.client.generate(model=self.model, prompt="", stream=False)
            logger.info(f"✅ Model {self.model} loaded")
        except Exception as e:
            logger.warning(f"⚠️ Could not preload model {self.model}: {str(e)}")


class ChatGPTClient(AnswerClient):
    """Remote chat-completion endpoint"""

    name = "CHATGPT"

    def __init__(self, api_key, model="gpt-4o-mini", client=None, temperature=0.3, max_tokens=5):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = client or openai.OpenAI(api_key=api_key)

    def complete(self, prompt):
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_ROLE},
                {"role": "user", "content": prompt}
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens
        )
        return (response.choices[0].message.content or "").strip()


def create_client(settings):
    """Pick the backend once, from the AI settings"""
    if settings.model == CHATGPT:
        return ChatGPTClient(settings.openai_api_key, model=settings.openai_model)
    return OllamaClient(model=settings.ollama_model, host=settings.ollama_host)


def ensure_ollama_running(client, autostart=True, retries=5, delay=2):
    """Make sure the local Ollama server answers, starting it if allowed"""
    if client.is_running():
        logger.info("✅ Ollama is running")
        client.preload()
        return

    if not autostart:
        raise BackendUnavailableError(f"Ollama is not running at {client.host}. Please start Ollama manually and try again")

    logger.warning("❌ Ollama is not running, attempting to start it...")
    try:
        subprocess.Popen(
            ["ollama", "serve"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        raise BackendUnavailableError(f"Failed to start Ollama: {str(e)}. Please start Ollama manually and try again") from e

    for _ in range(retries):
        time.sleep(delay)
        if client.is_running():
            logger.info("✅ Ollama started successfully")
            client.preload()
            return

    raise BackendUnavailableError("Failed to start Ollama after multiple attempts. Please start Ollama manually and try again")
