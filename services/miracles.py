# services/miracles.py
import logging

from schemas.content_schemas import EucharisticMiracle, MiracleSource
from services.model_client import ModelServiceError, get_model_client
from services.prompts import MIRACLE_SYSTEM, with_language

logger = logging.getLogger(__name__)

FEATURED_MIRACLES = [
    'Lanciano',
    'Buenos Aires',
    'Sokółka',
    'Santarém',
    'Bolsena-Orvieto',
    'Tixtla',
]


def get_eucharistic_miracle_info(query, language='en', client=None):
    """Research a Eucharistic miracle. Returns None for a blank query."""
    query = (query or '').strip()
    if not query:
        return None

    client = client or get_model_client()
    summary, sources = client.research(
        f'Provide a detailed summary of the Eucharistic miracle of "{query}". '
        f'Prioritize information from reliable Catholic sources.',
        with_language(MIRACLE_SYSTEM, language),
    )
    if not summary:
        raise ModelServiceError(
            "Could not retrieve information for this miracle. "
            "It may not be a recognized Eucharistic miracle."
        )

    return EucharisticMiracle(
        summary=summary,
        sources=[MiracleSource(uri=uri, title=title) for uri, title in sources],
    )
