# routes/miracles_routes.py
from flask import Blueprint, jsonify, request
import logging

from services import miracles
from services.model_client import ModelServiceError
from services.prompts import normalize_language

miracles_bp = Blueprint('miracles', __name__)
logger = logging.getLogger(__name__)


@miracles_bp.route('/featured', methods=['GET'])
def featured_miracles():
    return jsonify(miracles.FEATURED_MIRACLES)


@miracles_bp.route('/search', methods=['GET'])
def research_miracle():
    query_str = request.args.get('q', '')
    if not query_str.strip():
        return jsonify(None)

    language = normalize_language(request.args.get('lang'))
    try:
        logger.info(f"Researching Eucharistic miracle '{query_str}'")
        info = miracles.get_eucharistic_miracle_info(query_str, language)
        return jsonify(info.model_dump())
    except ModelServiceError as e:
        return jsonify({'error': e.message}), e.status_code
    except Exception as e:
        logger.error(f"Miracle research error: {str(e)}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred while researching the miracle.'}), 500
