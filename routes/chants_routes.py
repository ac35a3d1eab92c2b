# routes/chants_routes.py
from flask import Blueprint, jsonify, request
import logging

from services import chants
from services.model_client import ModelServiceError
from services.prompts import normalize_language

chants_bp = Blueprint('chants', __name__)
logger = logging.getLogger(__name__)


@chants_bp.route('/', methods=['GET'])
def chant_list():
    language = normalize_language(request.args.get('lang'))
    try:
        result = chants.get_chant_list(language)
    except ModelServiceError as e:
        return jsonify({'error': e.message}), e.status_code
    except Exception as e:
        logger.error(f"Chant list error: {str(e)}", exc_info=True)
        return jsonify({'error': 'An unknown error occurred.'}), 500

    return jsonify({
        'source_url': chants.CHANT_SOURCE_URL,
        'chants': [c.model_dump() for c in result],
    })


@chants_bp.route('/<path:title>', methods=['GET'])
def chant_lyrics(title):
    language = normalize_language(request.args.get('lang'))
    try:
        details = chants.get_chant_lyrics(title, language)
        return jsonify(details.model_dump())
    except ModelServiceError as e:
        return jsonify({'error': e.message}), e.status_code
    except Exception as e:
        logger.error(f"Chant lyrics error for '{title}': {str(e)}", exc_info=True)
        return jsonify({'error': 'An unknown error occurred.'}), 500
