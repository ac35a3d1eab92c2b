# services/scripture.py
import logging
from datetime import date
from typing import List

from schemas.content_schemas import BibleVerse, ChapterVerse, GospelReading
from services.model_client import ModelServiceError, get_model_client
from services.prompts import (
    ASK_SCRIPTURE_SYSTEM,
    BIBLE_SEARCH_SYSTEM,
    GOSPEL_SYSTEM,
    SCRIPTURE_SYSTEM,
    bible_translation,
    normalize_language,
    with_language,
)
from utils.bible_data import canonical_book, chapter_count, is_valid_reference

logger = logging.getLogger(__name__)


class InvalidReferenceError(ValueError):
    """Book or chapter outside the canon table; no request is made."""


def get_scripture(book, chapter, language='en', client=None) -> List[ChapterVerse]:
    canonical = canonical_book(book)
    if canonical is None:
        raise InvalidReferenceError(f"Unknown book: {book}")
    if not is_valid_reference(canonical, chapter):
        raise InvalidReferenceError(
            f"Invalid chapter '{chapter}': {canonical} has {chapter_count(canonical)} chapters"
        )
    chapter_number = int(str(chapter).strip())

    client = client or get_model_client()
    try:
        verses = client.generate_json(
            f"Provide the full text for the book of {canonical}, chapter {chapter_number}.",
            with_language(SCRIPTURE_SYSTEM.format(translation=bible_translation(language)), language),
            List[ChapterVerse],
            max_tokens=8000,
        )
    except ModelServiceError as e:
        logger.error(f"Error fetching scripture {canonical} {chapter_number}: {e.message}")
        raise ModelServiceError("Failed to retrieve the specified scripture. Please check the book and chapter.")

    if not verses:
        raise ModelServiceError("Failed to retrieve the specified scripture. Please check the book and chapter.")
    return sorted(verses, key=lambda v: v.verse)


def search_bible(query, language='en', client=None) -> List[BibleVerse]:
    query = (query or '').strip()
    if not query:
        return []

    client = client or get_model_client()
    try:
        return client.generate_json(
            f'Search the Bible for the phrase: "{query}"',
            with_language(BIBLE_SEARCH_SYSTEM.format(translation=bible_translation(language)), language),
            List[BibleVerse],
        )
    except ModelServiceError as e:
        logger.error(f"Error searching Bible for '{query}': {e.message}")
        raise ModelServiceError("Failed to perform the Bible search. Please try a different query.")


def ask_about_scripture(context_text, question, language='en', client=None) -> str:
    question = (question or '').strip()
    if not question:
        return ''

    client = client or get_model_client()
    prompt = f'Passage:\n"{(context_text or "").strip()}"\n\nQuestion: {question}'
    try:
        return client.generate_text(prompt, with_language(ASK_SCRIPTURE_SYSTEM, language))
    except ModelServiceError as e:
        logger.error(f"Error answering scripture question: {e.message}")
        raise ModelServiceError("Failed to get an answer. Please try again.")


def get_gospel_of_the_day(language='en', day=None, client=None) -> GospelReading:
    client = client or get_model_client()
    day = day or date.today()
    return client.generate_json(
        f"What is the Gospel reading at Mass on {day.isoformat()}?",
        with_language(GOSPEL_SYSTEM.format(translation=bible_translation(language)), language),
        GospelReading,
    )


# --- Text-to-speech helpers ---

def read_aloud_text(verses, start_index=0):
    """Text spoken when reading starts at the verse at `start_index`."""
    return ' '.join(v.text for v in verses[max(start_index, 0):])


def speech_locale(language):
    return 'es-ES' if normalize_language(language) == 'es' else 'en-US'
