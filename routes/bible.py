from flask import Blueprint, jsonify, request, current_app
import logging

from models.result import SingleVerse, VerseRange, WholeChapter, KeywordHits, NotFound
from schemas.verse_schemas import VerseRead, QueryResponse, ChapterPage
from utils.errors import EmptyCorpusError
from utils.search import SEARCH_MODES, MODE_ALL
from utils.sessions import TESTAMENTS

bible_bp = Blueprint('bible', __name__)

logger = logging.getLogger(__name__)


def _engine():
    return current_app.extensions['search_engine']


def _formatter():
    return current_app.extensions['result_formatter']


def _verses_of(result):
    """Flatten a retrieval result into verse records."""
    if isinstance(result, SingleVerse):
        return [VerseRead(**result.to_json())]
    if isinstance(result, VerseRange):
        return [VerseRead(book=result.book_name, chapter=result.chapter, verse=number, text=text)
                for number, text in result.verses]
    if isinstance(result, WholeChapter):
        return [VerseRead(book=result.book_name, chapter=result.chapter, verse=number, text=text)
                for number, text in enumerate(result.verses, start=1)]
    if isinstance(result, KeywordHits):
        return [VerseRead(**hit.to_json()) for hit in result.hits]
    return []


RESULT_KINDS = {
    SingleVerse: 'single_verse',
    VerseRange: 'verse_range',
    WholeChapter: 'whole_chapter',
    KeywordHits: 'keyword_hits',
    NotFound: 'not_found',
}


def build_query_response(result):
    return QueryResponse(
        kind=RESULT_KINDS[type(result)],
        blocks=_formatter().format_for_display(result),
        verses=_verses_of(result),
    )


@bible_bp.route('/books', methods=['GET'])
def get_books():
    testament = request.args.get('testament')
    if testament is not None and testament not in TESTAMENTS:
        return jsonify({"error": f"Unknown testament '{testament}'"}), 400
    return jsonify(_engine().list_books(testament))


@bible_bp.route('/chapters/<book>', methods=['GET'])
def get_chapters(book):
    chapters = _engine().list_chapters(book)
    if chapters is None:
        return jsonify({"error": "Book not found"}), 404
    return jsonify(chapters)


@bible_bp.route('/verses/<book>/<int:chapter>', methods=['GET'])
def get_verses(book, chapter):
    result = _engine().chapter(book, chapter)
    if isinstance(result, NotFound):
        return jsonify({"error": "Chapter not found"}), 404
    return jsonify([verse.model_dump() for verse in _verses_of(result)])


@bible_bp.route('/verse/<book>/<int:chapter>/<int:verse>', methods=['GET'])
def get_single_verse(book, chapter, verse):
    result = _engine().verse(book, chapter, verse)
    if isinstance(result, NotFound):
        return jsonify({"error": "Verse not found"}), 404
    return jsonify(result.to_json())


@bible_bp.route('/chapter/<book>/<int:chapter>/pages/<int:page>', methods=['GET'])
def get_chapter_page(book, chapter, page):
    engine = _engine()
    result = engine.chapter(book, chapter)
    if isinstance(result, NotFound):
        return jsonify({"error": "Chapter not found"}), 404

    content, total_pages = _formatter().chapter_page(result, page)
    if content is None:
        return jsonify({"error": "Page not found", "total_pages": total_pages}), 404

    navigation = engine.navigation(book, chapter)
    return jsonify(ChapterPage(
        book=book,
        chapter=chapter,
        page=page,
        total_pages=total_pages,
        content=content,
        **navigation
    ).model_dump())


@bible_bp.route('/query', methods=['GET'])
def query_bible():
    query_str = request.args.get('q', '').strip()
    if not query_str:
        return jsonify({"error": "Query parameter 'q' is required"}), 400

    try:
        result = _engine().resolve_query(query_str, limit=current_app.config['QUERY_LIMIT'])
        response = build_query_response(result)
    except Exception as e:
        logger.error(f"Query error for '{query_str}': {str(e)}", exc_info=True)
        return jsonify({'error': 'An error occurred while processing the query.'}), 500

    status = 404 if isinstance(result, NotFound) else 200
    return jsonify(response.model_dump()), status


@bible_bp.route('/search', methods=['GET'])
def search_bible():
    query_str = request.args.get('q', '')
    if not query_str.strip():
        return jsonify([])

    mode = request.args.get('mode', MODE_ALL)
    if mode not in SEARCH_MODES:
        return jsonify({"error": f"Unknown search mode '{mode}'"}), 400

    result = _engine().search(query_str, limit=current_app.config['SEARCH_LIMIT'], mode=mode)
    return jsonify([verse.model_dump() for verse in _verses_of(result)])


@bible_bp.route('/inline', methods=['GET'])
def inline_search():
    query_str = request.args.get('q', '').strip()
    if not query_str:
        return jsonify([])

    result = _engine().resolve_query(query_str, limit=current_app.config['INLINE_LIMIT'])
    if isinstance(result, KeywordHits):
        hits = result.hits
    elif isinstance(result, SingleVerse):
        hits = (result,)
    else:
        hits = ()
    return jsonify(_formatter().inline_results(hits))


@bible_bp.route('/random', methods=['GET'])
def random_verse():
    try:
        verse = _engine().random_verse()
    except EmptyCorpusError as e:
        logger.error(f"Random verse requested from an empty corpus: {e}")
        return jsonify({"error": "No verses available"}), 503

    response = verse.to_json()
    response["blocks"] = _formatter().format_for_display(verse)
    return jsonify(response)
