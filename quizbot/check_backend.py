import sys

from quizbot.ai.clients import create_client
from quizbot.ai.prompts import build_prompt
from quizbot.config import load_ai_settings
from quizbot.exceptions import ConfigError

TEST_QUESTION = "What is the capital of France?"
TEST_OPTIONS = ["London", "Paris", "Berlin", "Madrid"]
EXPECTED_ANSWER = 2


def check_backend(client):
    """Send a known question through ``client``; True when it picks Paris"""
    print(f"Testing {client.name} with a sample question...\n")
    print("Question:", TEST_QUESTION)
    print("Options:", TEST_OPTIONS)
    print(f"\nSending to {client.name}:", build_prompt(TEST_QUESTION, TEST_OPTIONS))

    answer = client.get_answer(TEST_QUESTION, TEST_OPTIONS)
    print("\nParsed answer:", answer)

    if answer == EXPECTED_ANSWER:
        print(f"✅ Test passed! {client.name} correctly identified Paris as the capital of France.")
        return True
    print(f"❌ Test failed! Expected answer: {EXPECTED_ANSWER} (Paris)")
    return False


def main():
    try:
        settings = load_ai_settings()
    except ConfigError as e:
        print(f"⚠️ {e}")
        return 1
    return 0 if check_backend(create_client(settings)) else 1


if __name__ == "__main__":
    sys.exit(main())
