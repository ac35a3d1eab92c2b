# routes/saints_routes.py
from flask import Blueprint, jsonify, request
import logging

from services import saints
from services.model_client import ModelServiceError
from services.prompts import normalize_language
from utils.share import build_share_data

saints_bp = Blueprint('saints', __name__)
logger = logging.getLogger(__name__)


@saints_bp.route('/featured', methods=['GET'])
def featured_saints():
    return jsonify(saints.FEATURED_SAINTS)


@saints_bp.route('/today', methods=['GET'])
def saints_of_the_day():
    language = normalize_language(request.args.get('lang'))
    try:
        result = saints.get_saints_of_the_day(language)
        return jsonify([s.model_dump() for s in result])
    except ModelServiceError as e:
        logger.error(f"Saints of the day error: {e.message}")
        return jsonify({'error': "Could not load today's saints."}), e.status_code
    except Exception as e:
        logger.error(f"Saints of the day error: {str(e)}", exc_info=True)
        return jsonify({'error': "Could not load today's saints."}), 500


@saints_bp.route('/suggestions', methods=['GET'])
def saint_suggestions():
    # Autocomplete never reports errors, it just comes back empty
    query_str = request.args.get('q', '')
    language = normalize_language(request.args.get('lang'))
    try:
        return jsonify(saints.get_saint_suggestions(query_str, language))
    except Exception as e:
        logger.warning(f"Suggestion error for '{query_str}': {str(e)}")
        return jsonify([])


@saints_bp.route('/<path:name>', methods=['GET'])
def saint_detail(name):
    name = name.strip()
    if not name:
        return jsonify({'error': 'A saint name is required'}), 400

    language = normalize_language(request.args.get('lang'))
    try:
        logger.info(f"Fetching saint info for '{name}' ({language})")
        info = saints.get_saint_info(name, language)
    except ModelServiceError as e:
        # Includes the "not a recognized saint" reasoning, shown verbatim
        logger.info(f"Saint lookup failed for '{name}': {e.message}")
        return jsonify({'error': e.message}), e.status_code
    except Exception as e:
        logger.error(f"Saint lookup error for '{name}': {str(e)}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred while fetching saint information.'}), 500

    response = info.model_dump()
    response['share'] = build_share_data(
        title=info.name,
        text=f"{info.name}: {info.summary}",
        url=request.args.get('share_url'),
    )
    return jsonify(response)
