import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv()


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('true', '1', 'yes', 'on')


def _env_int(name, default):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


DEFAULT_ENDINGS = [
    "Пусть эти слова принесут твоей душе покой и свет.",
    "Пусть эти слова напомнят о том, что ты любим и не один.",
    "Пусть эти слова станут для тебя тихим утешением в суете дня.",
    "Пусть эти слова согреют твое сердце и укрепят надежду.",
    "Пусть эти слова наполнят твой внутренний мир тишиной.",
    "Пусть эти слова станут глотком живой воды для твоей души.",
]


class Config:
    SQLITE_DB_PATH = os.getenv('SQLITE_DB_PATH', os.path.join(BASE_DIR, 'bible.db'))
    DATABASE_URL = os.getenv('DATABASE_URL', f"sqlite:///{SQLITE_DB_PATH}")

    # Corpus
    CORPUS_PATH = os.getenv('CORPUS_PATH', os.path.join(BASE_DIR, 'data', 'bible.json'))
    NEW_TESTAMENT_START = os.getenv('NEW_TESTAMENT_START', 'От Матфея')

    # Capability flags
    FUZZY_MATCHING = _env_bool('FUZZY_MATCHING', True)
    FUZZY_MAX_DISTANCE = _env_int('FUZZY_MAX_DISTANCE', 5)
    VERSE_RANGES = _env_bool('VERSE_RANGES', True)
    FREE_TEXT_MODE = os.getenv('FREE_TEXT_MODE', 'phrase')

    # Result limits per consuming context
    QUERY_LIMIT = _env_int('QUERY_LIMIT', 5)
    SEARCH_LIMIT = _env_int('SEARCH_LIMIT', 3)
    INLINE_LIMIT = _env_int('INLINE_LIMIT', 10)

    # Display
    MAX_BLOCK_SIZE = _env_int('MAX_BLOCK_SIZE', 4000)
    CHAPTER_HEADER = os.getenv('CHAPTER_HEADER', '📖 *{book}* — глава {chapter}')
    NOT_FOUND_TEXT = os.getenv(
        'NOT_FOUND_TEXT',
        '❌ Ничего не найдено. Введите, например, "Иоанна 3:16", "Бытие 1" или просто слово/фразу из стиха.'
    )

    # Broadcast
    TELEGRAM_BOT_TOKEN = os.getenv('TELEGRAM_BOT_TOKEN')
    TELEGRAM_API_URL = os.getenv('TELEGRAM_API_URL', 'https://api.telegram.org')
    BROADCAST_CRONS = [
        expr.strip() for expr in os.getenv('BROADCAST_CRONS', '0 */2 * * *').split(';') if expr.strip()
    ]
    BROADCAST_TIMEZONE = os.getenv('BROADCAST_TIMEZONE', 'Europe/Moscow')
    BROADCAST_ALLOWED_HOURS = os.getenv('BROADCAST_ALLOWED_HOURS', '7-23')
    BROADCAST_ON_STARTUP = _env_bool('BROADCAST_ON_STARTUP', True)
    BROADCAST_WORKERS = _env_int('BROADCAST_WORKERS', 8)
    BROADCAST_ENDINGS = [
        line.strip() for line in os.getenv('BROADCAST_ENDINGS', '|'.join(DEFAULT_ENDINGS)).split('|') if line.strip()
    ]
    DELIVERY_MAX_RETRIES = _env_int('DELIVERY_MAX_RETRIES', 3)
    DELIVERY_BASE_DELAY = float(os.getenv('DELIVERY_BASE_DELAY', '2'))
