# routes/bookmarks_routes.py
from flask import Blueprint, request, jsonify, current_app
from pydantic import ValidationError
from schemas.bookmark_schemas import BookmarkedVerse, BookmarkToggle
from utils.bible_data import canonical_book
from utils.bookmark_store import BookmarkStore, make_reference
from utils.device import device_required
import logging

logger = logging.getLogger(__name__)
bookmarks_bp = Blueprint('bookmarks_bp', __name__, url_prefix='/api/bookmarks')


def _get_store(device_id):
    storage_factory = current_app.extensions['bookmark_storage_factory']
    key = f"{current_app.config['BOOKMARK_KEY']}:{device_id}"
    return BookmarkStore(storage_factory(key))


def _dump(bookmarks):
    return [b.model_dump() for b in bookmarks]


@bookmarks_bp.route("/", methods=['GET'])
@device_required
def get_bookmarks(device_id):
    try:
        store = _get_store(device_id)
        return jsonify(_dump(store.list())), 200
    except Exception as e:
        logger.error(f"Error fetching bookmarks: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to fetch bookmarks"}), 500


@bookmarks_bp.route("/toggle", methods=['POST'])
@device_required
def toggle_bookmark(device_id):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid JSON payload"}), 400

    try:
        payload = BookmarkToggle.model_validate(data)
    except ValidationError as e:
        logger.info(f"Rejected bookmark payload: {e.errors()}")
        return jsonify({"error": "Missing or invalid fields (book, chapter, verse)"}), 400

    # References are built from the canonical spelling so "genesis" and
    # "Genesis" land on the same key; unknown names are kept as sent
    book = canonical_book(payload.book) or payload.book.strip()
    verse = BookmarkedVerse(
        book=book,
        chapter=payload.chapter,
        reference=make_reference(book, payload.chapter, payload.verse),
        text=f"{payload.verse} {payload.text}".strip(),
    )

    try:
        store = _get_store(device_id)
        bookmarks = store.toggle(verse)
        logger.info(f"Toggled bookmark {verse.reference} for device {device_id}")
        return jsonify({
            "reference": verse.reference,
            "bookmarked": store.is_bookmarked(verse.reference),
            "bookmarks": _dump(bookmarks),
        }), 200
    except Exception as e:
        logger.error(f"Error toggling bookmark {verse.reference}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to update bookmarks"}), 500


@bookmarks_bp.route("/<path:reference>", methods=['DELETE'])
@device_required
def delete_bookmark(device_id, reference):
    try:
        store = _get_store(device_id)
        bookmarks = store.remove(reference)
        return jsonify(_dump(bookmarks)), 200
    except Exception as e:
        logger.error(f"Error deleting bookmark {reference}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to delete bookmark"}), 500
