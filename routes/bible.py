# routes/bible.py
from flask import Blueprint, jsonify, request
import logging

from services import scripture
from services.model_client import ModelServiceError
from services.prompts import normalize_language
from utils.bible_data import BIBLE_BOOKS, canonical_book, testament_of

bible_bp = Blueprint('bible', __name__)
logger = logging.getLogger(__name__)


@bible_bp.route('/books', methods=['GET'])
def get_books():
    return jsonify([
        {'name': name, 'chapters': chapters, 'testament': testament_of(name)}
        for name, chapters in BIBLE_BOOKS.items()
    ])


@bible_bp.route('/chapter/<book>/<chapter>', methods=['GET'])
def get_chapter(book, chapter):
    language = normalize_language(request.args.get('lang'))
    try:
        logger.info(f"Fetching {book} {chapter} ({language})")
        verses = scripture.get_scripture(book, chapter, language)
    except scripture.InvalidReferenceError as e:
        return jsonify({'error': str(e)}), 400
    except ModelServiceError as e:
        return jsonify({'error': e.message}), e.status_code
    except Exception as e:
        logger.error(f"Error fetching {book} {chapter}: {str(e)}", exc_info=True)
        return jsonify({'error': 'An unknown error occurred.'}), 500

    return jsonify({
        'book': canonical_book(book),
        'chapter': str(int(chapter.strip())),
        'speech_locale': scripture.speech_locale(language),
        'verses': [v.model_dump() for v in verses],
    })


@bible_bp.route('/search', methods=['GET'])
def search_bible():
    query_str = request.args.get('q', '')
    if not query_str.strip():
        return jsonify([])

    language = normalize_language(request.args.get('lang'))
    try:
        results = scripture.search_bible(query_str, language)
        return jsonify([v.model_dump() for v in results])
    except ModelServiceError as e:
        return jsonify({'error': e.message}), e.status_code
    except Exception as e:
        logger.error(f"Search error: {str(e)}", exc_info=True)
        return jsonify({'error': 'An error occurred during the search.'}), 500


@bible_bp.route('/ask', methods=['POST'])
def ask_about_passage():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400

    context_text = data.get('context')
    question = data.get('question')
    if not isinstance(context_text, str) or not isinstance(question, str):
        return jsonify({'error': 'Missing required fields (context, question)'}), 400

    language = normalize_language(data.get('lang'))
    try:
        answer = scripture.ask_about_scripture(context_text, question, language)
        return jsonify({'answer': answer})
    except ModelServiceError as e:
        return jsonify({'error': e.message}), e.status_code
    except Exception as e:
        logger.error(f"Ask error: {str(e)}", exc_info=True)
        return jsonify({'error': 'An unknown error occurred.'}), 500


@bible_bp.route('/gospel', methods=['GET'])
def gospel_of_the_day():
    language = normalize_language(request.args.get('lang'))
    try:
        reading = scripture.get_gospel_of_the_day(language)
        return jsonify(reading.model_dump())
    except ModelServiceError as e:
        logger.error(f"Gospel of the day error: {e.message}")
        return jsonify({'error': "Could not load today's Gospel."}), e.status_code
    except Exception as e:
        logger.error(f"Gospel of the day error: {str(e)}", exc_info=True)
        return jsonify({'error': "Could not load today's Gospel."}), 500
