# scripts/convert_kjv.py
"""Convert a flat KJV JSON file ({"Genesis 1:1": "...", ...}) into the nested
corpus layout the service loads: [{"name": ..., "chapters": [[verse, ...]]}].
"""
import json
import sys
from pathlib import Path

# Canonical order: book name -> (code, testament, chapter count)
BOOKS_MAP = {
    'Genesis': ('GEN', 'old', 50),
    'Exodus': ('EXO', 'old', 40),
    'Leviticus': ('LEV', 'old', 27),
    'Numbers': ('NUM', 'old', 36),
    'Deuteronomy': ('DEU', 'old', 34),
    'Joshua': ('JOS', 'old', 24),
    'Judges': ('JDG', 'old', 21),
    'Ruth': ('RUT', 'old', 4),
    '1 Samuel': ('SA1', 'old', 31),
    '2 Samuel': ('SA2', 'old', 24),
    '1 Kings': ('KI1', 'old', 22),
    '2 Kings': ('KI2', 'old', 25),
    '1 Chronicles': ('CH1', 'old', 29),
    '2 Chronicles': ('CH2', 'old', 36),
    'Ezra': ('EZR', 'old', 10),
    'Nehemiah': ('NEH', 'old', 13),
    'Esther': ('EST', 'old', 10),
    'Job': ('JOB', 'old', 42),
    'Psalms': ('PSA', 'old', 150),
    'Proverbs': ('PRO', 'old', 31),
    'Ecclesiastes': ('ECC', 'old', 12),
    'Song of Solomon': ('SNG', 'old', 8),
    'Isaiah': ('ISA', 'old', 66),
    'Jeremiah': ('JER', 'old', 52),
    'Lamentations': ('LAM', 'old', 5),
    'Ezekiel': ('EZK', 'old', 48),
    'Daniel': ('DAN', 'old', 12),
    'Hosea': ('HOS', 'old', 14),
    'Joel': ('JOL', 'old', 3),
    'Amos': ('AMO', 'old', 9),
    'Obadiah': ('OBA', 'old', 1),
    'Jonah': ('JON', 'old', 4),
    'Micah': ('MIC', 'old', 7),
    'Nahum': ('NAH', 'old', 3),
    'Habakkuk': ('HAB', 'old', 3),
    'Zephaniah': ('ZEP', 'old', 3),
    'Haggai': ('HAG', 'old', 2),
    'Zechariah': ('ZEC', 'old', 14),
    'Malachi': ('MAL', 'old', 4),
    'Matthew': ('MAT', 'new', 28),
    'Mark': ('MRK', 'new', 16),
    'Luke': ('LUK', 'new', 24),
    'John': ('JHN', 'new', 21),
    'Acts': ('ACT', 'new', 28),
    'Romans': ('ROM', 'new', 16),
    '1 Corinthians': ('CO1', 'new', 16),
    '2 Corinthians': ('CO2', 'new', 13),
    'Galatians': ('GAL', 'new', 6),
    'Ephesians': ('EPH', 'new', 6),
    'Philippians': ('PHP', 'new', 4),
    'Colossians': ('COL', 'new', 4),
    '1 Thessalonians': ('TH1', 'new', 5),
    '2 Thessalonians': ('TH2', 'new', 3),
    '1 Timothy': ('TI1', 'new', 6),
    '2 Timothy': ('TI2', 'new', 4),
    'Titus': ('TIT', 'new', 3),
    'Philemon': ('PHM', 'new', 1),
    'Hebrews': ('HEB', 'new', 13),
    'James': ('JAS', 'new', 5),
    '1 Peter': ('PE1', 'new', 5),
    '2 Peter': ('PE2', 'new', 3),
    '1 John': ('JO1', 'new', 5),
    '2 John': ('JO2', 'new', 1),
    '3 John': ('JO3', 'new', 1),
    'Jude': ('JUD', 'new', 1),
    'Revelation': ('REV', 'new', 22)
}

# Alternate names found in some KJV dumps
ALIASES = {
    "Solomon's Song": 'Song of Solomon',
}

# The first new testament book, for NEW_TESTAMENT_START
NEW_TESTAMENT_START = next(name for name, (_, testament, _) in BOOKS_MAP.items() if testament == 'new')


def parse_reference(ref):
    """Parse a reference like 'Genesis 1:1' into (book_name, chapter, verse)"""
    book_chapter, verse = ref.rsplit(':', 1)
    book_parts = book_chapter.rsplit(' ', 1)
    chapter = book_parts[-1]
    book_name = ' '.join(book_parts[:-1])
    return book_name, int(chapter), int(verse)


def clean_verse_text(text):
    """Clean verse text by removing any leading '#' and trimming whitespace"""
    return text.lstrip('#').strip()


def convert_kjv(verses_data):
    """Returns (nested corpus list, skipped references)."""
    collected = {}
    skipped = []

    for ref, text in verses_data.items():
        try:
            book_name, chapter, verse = parse_reference(ref)
        except ValueError:
            print(f"Warning: Cannot parse reference '{ref}'")
            skipped.append(ref)
            continue

        book_name = ALIASES.get(book_name, book_name)
        if book_name not in BOOKS_MAP:
            print(f"Warning: Unknown book '{book_name}' in reference '{ref}'")
            skipped.append(ref)
            continue
        collected.setdefault(book_name, {}).setdefault(chapter, {})[verse] = clean_verse_text(text)

    corpus = []
    for book_name in BOOKS_MAP:
        chapters = collected.get(book_name)
        if not chapters:
            continue
        nested = []
        for chapter in range(1, max(chapters) + 1):
            verses = chapters.get(chapter, {})
            last = max(verses) if verses else 0
            # Gaps become empty verses so numbering stays positional
            nested.append([verses.get(number, '') for number in range(1, last + 1)])
        corpus.append({"name": book_name, "chapters": nested})

    return corpus, skipped


def convert_file(json_path, output_path):
    print(f"Reading JSON file from: {json_path}")
    with open(json_path, 'r', encoding='utf-8-sig') as f:
        verses_data = json.load(f)

    corpus, skipped = convert_kjv(verses_data)

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(corpus, f, ensure_ascii=False)

    verse_count = sum(len(chapter) for book in corpus for chapter in book["chapters"])
    print(f"\nConversion complete!")
    print(f"Wrote {len(corpus)} books and {verse_count} verses to {output_path}")
    if skipped:
        print(f"Skipped {len(skipped)} verses due to unknown book names")
    print(f"Set NEW_TESTAMENT_START='{NEW_TESTAMENT_START}' when serving this corpus")

    for book in corpus:
        expected = BOOKS_MAP[book["name"]][2]
        if len(book["chapters"]) != expected:
            print(f"Warning: {book['name']} has {len(book['chapters'])} chapters, expected {expected}")

    return corpus


if __name__ == '__main__':
    if len(sys.argv) != 3:
        print("Usage: python scripts/convert_kjv.py <path_to_kjv.json> <output_corpus.json>")
        sys.exit(1)

    convert_file(sys.argv[1], sys.argv[2])
