# utils/share.py
from urllib.parse import urlparse


def build_share_data(title, text, url=None):
    """Payload for a share sheet.

    Share targets reject URLs that are not absolute http(s) links (e.g.
    'about:blank' in sandboxed pages), so such a URL is dropped and the
    title and text are shared on their own.
    """
    data = {'title': title, 'text': text}
    if url:
        try:
            parsed = urlparse(url)
        except ValueError:
            parsed = None
        if parsed is not None and parsed.scheme in ('http', 'https') and parsed.netloc:
            data['url'] = url
    return data
