"""
Flashcard and Q&A generation with Gemini.

Note text is cut to a fixed number of characters before it goes into a prompt.
Every call goes to the model; nothing is cached or retried.
"""
import json
import logging
import re
import threading
from django.conf import settings
from google import genai
from core.exceptions import ConfigError, GenerationFailed

logger = logging.getLogger(__name__)

FLASHCARD_CHAR_LIMIT = 5000
ANSWER_CHAR_LIMIT = 4000

FLASHCARD_ERROR = "Failed to generate flashcards. Please try again."
ANSWER_ERROR = "Failed to get an answer. Please try again."

FLASHCARD_PROMPT = """Act as an expert educational content creator for students. Create a comprehensive set of flashcards from the provided note content. Each flashcard should be a JSON object with:
- "question" (string): A clear, specific question that tests understanding
- "answer" (string): A short, comprehensive answer that explains the concept thoroughly

Guidelines for creating effective flashcards:
- Create 10-20 flashcards covering the most important concepts
- Make questions progressively more challenging
- Include practical examples and applications when relevant
- Provide explanations in answers, not just basic facts
- Connect related concepts when appropriate
- Focus on understanding rather than rote memorization

Note content: {content}

Return the entire set of flashcards as a single JSON array. Respond with only the JSON array and no additional text, explanation, or markdown formatting."""

ANSWER_PROMPT = """You are an AI assistant helping students understand their notes. Based on the following note content, please answer the student's question comprehensively and accurately.

Note content: {content}

Student's question: {question}

Please provide a clear answer based on the note content. If the question cannot be answered from the provided content, say so politely. Respond in plain text."""

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)

_client = None
_client_key = None
_client_lock = threading.Lock()


def get_client():
    """
    Shared Gemini client. Built once per API key; concurrent first callers
    wait on the lock and reuse the same instance.
    """
    global _client, _client_key

    api_key = settings.GOOGLE_API_KEY
    if not api_key:
        logger.critical("GOOGLE_API_KEY is not set; flashcard generation is unavailable.")
        raise ConfigError("GOOGLE_API_KEY environment variable is not set")

    with _client_lock:
        if _client is None or _client_key != api_key:
            _client = genai.Client(api_key=api_key)
            _client_key = api_key
            logger.info("Gemini client configured")
        return _client


def truncate_content(text, limit):
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def build_flashcard_prompt(note_text):
    return FLASHCARD_PROMPT.format(content=truncate_content(note_text, FLASHCARD_CHAR_LIMIT))


def build_answer_prompt(note_text, question):
    return ANSWER_PROMPT.format(content=truncate_content(note_text, ANSWER_CHAR_LIMIT), question=question)


def _complete(prompt):
    client = get_client()
    response = client.models.generate_content(model=settings.GEMINI_MODEL, contents=prompt)
    return response.text or ""


def strip_code_fences(text):
    return _FENCE_RE.sub("", text).strip()


def parse_flashcards(raw):
    """Parse the model's reply into [{"question", "answer"}]; all or nothing."""
    try:
        cards = json.loads(strip_code_fences(raw))
    except (TypeError, ValueError) as e:
        raise GenerationFailed(FLASHCARD_ERROR) from e

    if not isinstance(cards, list) or not cards:
        raise GenerationFailed(FLASHCARD_ERROR)

    parsed = []
    for card in cards:
        if not isinstance(card, dict):
            raise GenerationFailed(FLASHCARD_ERROR)
        question, answer = card.get("question"), card.get("answer")
        if not isinstance(question, str) or not question.strip():
            raise GenerationFailed(FLASHCARD_ERROR)
        if not isinstance(answer, str) or not answer.strip():
            raise GenerationFailed(FLASHCARD_ERROR)
        parsed.append({"question": question.strip(), "answer": answer.strip()})
    return parsed


def generate_flashcards(note_text):
    prompt = build_flashcard_prompt(note_text)
    try:
        raw = _complete(prompt)
    except ConfigError:
        raise
    except Exception as e:
        logger.error(f"Gemini flashcard request failed: {e}", exc_info=True)
        raise GenerationFailed(FLASHCARD_ERROR) from e

    try:
        cards = parse_flashcards(raw)
    except GenerationFailed:
        logger.error(f"Unusable flashcard response from Gemini: {raw[:200]!r}")
        raise

    logger.info(f"Generated {len(cards)} flashcards from {len(note_text)} characters of notes")
    return cards


def answer_question(note_text, question):
    prompt = build_answer_prompt(note_text, question)
    try:
        answer = _complete(prompt).strip()
    except ConfigError:
        raise
    except Exception as e:
        logger.error(f"Gemini question request failed: {e}", exc_info=True)
        raise GenerationFailed(ANSWER_ERROR) from e

    if not answer:
        logger.error("Gemini returned an empty answer")
        raise GenerationFailed(ANSWER_ERROR)
    return answer
