# services/saints.py
import logging
from datetime import date
from typing import List

from config import Config
from schemas.content_schemas import SaintInfo, SaintOfTheDay, SaintSuggestions, SaintValidation
from services.model_client import ModelServiceError, get_model_client
from services.prompts import (
    SAINT_INFO_SYSTEM,
    SAINT_SUGGESTION_SYSTEM,
    SAINT_VALIDATION_SYSTEM,
    SAINTS_OF_THE_DAY_SYSTEM,
    with_language,
)

logger = logging.getLogger(__name__)

FEATURED_SAINTS = [
    'Francis of Assisi',
    'Thérèse of Lisieux',
    'Augustine of Hippo',
    'Joan of Arc',
    'Thomas Aquinas',
    'Maximilian Kolbe',
]


class NotASaintError(ModelServiceError):
    """The model judged the name not to be a recognized Catholic saint."""
    status_code = 404


def validate_saint(name, language='en', client=None) -> SaintValidation:
    client = client or get_model_client()
    return client.generate_json(
        f'Is the person "{name}" a recognized Catholic Saint?',
        with_language(SAINT_VALIDATION_SYSTEM, language),
        SaintValidation,
    )


def get_saint_info(name, language='en', client=None) -> SaintInfo:
    """Validate the name, then fetch the saint's details."""
    client = client or get_model_client()
    validation = validate_saint(name, language, client=client)
    if not validation.is_saint:
        logger.info(f"'{name}' rejected as a saint: {validation.reasoning}")
        raise NotASaintError(validation.reasoning or f'"{name}" is not a recognized Catholic Saint.')

    return client.generate_json(
        f"Provide a detailed biography and key information for Saint {name}.",
        with_language(SAINT_INFO_SYSTEM, language),
        SaintInfo,
        temperature=None,
    )


def get_saints_of_the_day(language='en', day=None, client=None) -> List[SaintOfTheDay]:
    client = client or get_model_client()
    day = day or date.today()
    return client.generate_json(
        f"Which saints are commemorated on {day.strftime('%B')} {day.day}?",
        with_language(SAINTS_OF_THE_DAY_SYSTEM, language),
        List[SaintOfTheDay],
    )


def get_saint_suggestions(query, language='en', client=None) -> List[str]:
    """Autocomplete saint names. Never raises: failures give an empty list."""
    query = (query or '').strip()
    if len(query) < Config.SUGGESTION_MIN_LENGTH:
        return []

    try:
        client = client or get_model_client()
        result = client.generate_json(
            f'Partial name: "{query}"',
            with_language(SAINT_SUGGESTION_SYSTEM, language),
            SaintSuggestions,
            max_tokens=300,
        )
    except ModelServiceError as e:
        logger.warning(f"Suggestion fetch failed for '{query}': {e.message}")
        return []

    names = []
    for name in result.suggestions:
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return names[:Config.SUGGESTION_LIMIT]
