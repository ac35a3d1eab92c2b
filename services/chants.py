# services/chants.py
import logging
from typing import List

from schemas.content_schemas import Chant, ChantDetails
from services.model_client import ModelServiceError, get_model_client
from services.prompts import CHANT_LIST_SYSTEM, CHANT_LYRICS_SYSTEM, with_language

logger = logging.getLogger(__name__)

CHANT_SOURCE_URL = 'https://neocatechumenaleiter.org/cantoral-resucito/'


def get_chant_list(language='en', client=None) -> List[Chant]:
    client = client or get_model_client()
    chants = client.generate_json(
        "List the chants of the Resucitó chant book.",
        with_language(CHANT_LIST_SYSTEM, language),
        List[Chant],
        max_tokens=8000,
    )
    # The book lists each chant once
    seen = set()
    unique = []
    for chant in chants:
        key = chant.title.strip().lower()
        if key and key not in seen:
            seen.add(key)
            unique.append(chant)
    if not unique:
        raise ModelServiceError("The chant list is currently unavailable.")
    return unique


def get_chant_lyrics(title, language='en', client=None) -> ChantDetails:
    client = client or get_model_client()
    lyrics = client.generate_text(
        f'Provide the lyrics of the chant "{title}".',
        with_language(CHANT_LYRICS_SYSTEM, language),
    )
    return ChantDetails(title=title, lyrics=lyrics)
