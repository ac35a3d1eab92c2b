# utils/bible_data.py
# Catholic canon (73 books) with chapter counts, in canonical order.

OLD_TESTAMENT = [
    ('Genesis', 50), ('Exodus', 40), ('Leviticus', 27), ('Numbers', 36), ('Deuteronomy', 34),
    ('Joshua', 24), ('Judges', 21), ('Ruth', 4), ('1 Samuel', 31), ('2 Samuel', 24),
    ('1 Kings', 22), ('2 Kings', 25), ('1 Chronicles', 29), ('2 Chronicles', 36), ('Ezra', 10),
    ('Nehemiah', 13), ('Tobit', 14), ('Judith', 16), ('Esther', 10), ('1 Maccabees', 16),
    ('2 Maccabees', 15), ('Job', 42), ('Psalms', 150), ('Proverbs', 31), ('Ecclesiastes', 12),
    ('Song of Solomon', 8), ('Wisdom', 19), ('Sirach', 51), ('Isaiah', 66),
    ('Jeremiah', 52), ('Lamentations', 5), ('Baruch', 6), ('Ezekiel', 48), ('Daniel', 14),
    ('Hosea', 14), ('Joel', 3), ('Amos', 9), ('Obadiah', 1), ('Jonah', 4), ('Micah', 7),
    ('Nahum', 3), ('Habakkuk', 3), ('Zephaniah', 3), ('Haggai', 2), ('Zechariah', 14),
    ('Malachi', 4),
]

NEW_TESTAMENT = [
    ('Matthew', 28), ('Mark', 16), ('Luke', 24), ('John', 21), ('Acts', 28),
    ('Romans', 16), ('1 Corinthians', 16), ('2 Corinthians', 13), ('Galatians', 6),
    ('Ephesians', 6), ('Philippians', 4), ('Colossians', 4), ('1 Thessalonians', 5),
    ('2 Thessalonians', 3), ('1 Timothy', 6), ('2 Timothy', 4), ('Titus', 3),
    ('Philemon', 1), ('Hebrews', 13), ('James', 5), ('1 Peter', 5), ('2 Peter', 3),
    ('1 John', 5), ('2 John', 1), ('3 John', 1), ('Jude', 1), ('Revelation', 22),
]

BIBLE_BOOKS = dict(OLD_TESTAMENT + NEW_TESTAMENT)

# Alternate spellings accepted on input
_ALIASES = {
    'psalm': 'Psalms',
    'song of songs': 'Song of Solomon',
    'canticle of canticles': 'Song of Solomon',
    'qoheleth': 'Ecclesiastes',
    'ecclesiasticus': 'Sirach',
    'apocalypse': 'Revelation',
    'revelations': 'Revelation',
}
_BY_LOWER = {name.lower(): name for name in BIBLE_BOOKS}


def canonical_book(name):
    """Return the canonical spelling of a book name, or None if unknown."""
    if not name:
        return None
    key = ' '.join(name.split()).lower()
    return _BY_LOWER.get(key) or _ALIASES.get(key)


def chapter_count(book):
    canonical = canonical_book(book)
    return BIBLE_BOOKS.get(canonical, 0) if canonical else 0


def is_valid_reference(book, chapter):
    try:
        chapter = int(str(chapter).strip())
    except (TypeError, ValueError):
        return False
    return 1 <= chapter <= chapter_count(book)


def testament_of(book):
    canonical = canonical_book(book)
    if canonical is None:
        return None
    return 'old' if canonical in dict(OLD_TESTAMENT) else 'new'
