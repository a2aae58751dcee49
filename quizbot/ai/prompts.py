import re

# System role for the chat backend
SYSTEM_ROLE = """You are a quiz assistant. Respond only with the number of the correct answer.
No explanation needed."""

LEADING_INTEGER = re.compile(r"[+-]?\d+")


def _number_choices(count):
    """'1', '1 or 2', '1, 2, or 3' ..."""
    numbers = [str(i) for i in range(1, count + 1)]
    if len(numbers) <= 2:
        return " or ".join(numbers)
    return ", ".join(numbers[:-1]) + f", or {numbers[-1]}"


def build_prompt(question, options):
    """Build the prompt sent to either backend: question, numbered options, instruction"""
    options_text = "\n".join(f"{i}. {option}" for i, option in enumerate(options, 1))
    return (
        f"\nQuestion: {question}\n"
        f"Options:\n{options_text}\n\n"
        "Please analyze the question and options carefully. "
        f"Respond with ONLY the number ({_number_choices(len(options))}) of the correct answer. "
        "Just the number, no explanation needed."
    )


def parse_answer(reply, option_count):
    """
    Turn a free-text model reply into a 1-based option index.

    The trimmed reply must start with an integer ("2", "2.", "2) Paris");
    anything else, or a number outside 1..option_count, gives None.
    """
    if reply is None:
        return None
    match = LEADING_INTEGER.match(reply.strip())
    if not match:
        return None
    answer = int(match.group())
    if not 1 <= answer <= option_count:
        return None
    return answer
