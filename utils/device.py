# utils/device.py
import re
from functools import wraps
from flask import request, jsonify
import logging

logger = logging.getLogger(__name__)

DEVICE_HEADER = 'X-Device-Id'
_DEVICE_ID_RE = re.compile(r'^[A-Za-z0-9_.-]{1,128}$')


def device_required(f):
    """Decorator that scopes a route to the calling device.

    Bookmarks belong to a device rather than an account, so the id comes
    from the X-Device-Id header and is passed as the first argument.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        device_id = request.headers.get(DEVICE_HEADER, '').strip()

        if not device_id:
            logger.warning(f"{DEVICE_HEADER} header missing for {request.path}")
            return jsonify({'error': f'{DEVICE_HEADER} header is required'}), 400

        if not _DEVICE_ID_RE.match(device_id):
            logger.warning(f"Malformed device id for {request.path}: {device_id[:20]}...")
            return jsonify({'error': 'Invalid device identifier format'}), 400

        return f(device_id, *args, **kwargs)

    return decorated
