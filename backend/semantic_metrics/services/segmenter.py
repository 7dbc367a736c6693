import re
from typing import FrozenSet, List

# Terminal punctuation run, optional closing quotes/brackets, then a boundary:
# whitespace, end of text, or the opening mark of a Spanish question/exclamation.
SENTENCE_END_REGEX = re.compile(r"([.!?…]+)([\"'»”’)\]]*)(?=\s|$|[¿¡])")
LAST_WORD_REGEX = re.compile(r"(\S+)$")
WORD_CHAR_REGEX = re.compile(r"\w")
WHITESPACE_REGEX = re.compile(r"\s+")

QUOTE_TRANSLATION = str.maketrans({"“": '"', "”": '"', "‘": "'", "’": "'"})

# Lower-cased, without the final period
ABBREVIATIONS: FrozenSet[str] = frozenset(
    {
        "sr",
        "sra",
        "srta",
        "sres",
        "dr",
        "dra",
        "lic",
        "ing",
        "prof",
        "profa",
        "ud",
        "uds",
        "vd",
        "vds",
        "etc",
        "pág",
        "págs",
        "p",
        "pp",
        "núm",
        "nro",
        "vol",
        "cap",
        "ej",
        "p. ej",
        "ee",
        "ee. uu",
        "aprox",
        "av",
        "avda",
        "dto",
        "depto",
        "tel",
        "fig",
        "min",
        "máx",
        "mín",
    }
)

# Abbreviations that also close sentences when the next word is capitalized
SENTENCE_FINAL_ABBREVIATIONS: FrozenSet[str] = frozenset({"etc"})


def normalize_text(text: str) -> str:
    """Collapses whitespace and replaces typographic quotes with plain ones."""
    return WHITESPACE_REGEX.sub(" ", text.translate(QUOTE_TRANSLATION)).strip()


def segment(text: str, abbreviations: FrozenSet[str] = ABBREVIATIONS) -> List[str]:
    """Splits a text unit into sentences.

    The terminal punctuation (and any closing quote or bracket after it) stays
    attached to its sentence. Periods after known abbreviations or
    upper-case initials do not end a sentence, but a lower-case single letter
    ("la b.") or "etc." followed by a capitalized word does. Periods inside
    numbers never match because a boundary requires whitespace after the
    terminator.

    Args:
        text (str): The text unit to split.
        abbreviations (FrozenSet[str]): Lower-cased abbreviations without their
            final period.

    Returns:
        List[str]: Sentences in order; empty for empty or whitespace-only input.
    """
    if not text or not text.strip():
        return []

    clean_text = normalize_text(text)
    sentences = []
    start = 0

    for match in SENTENCE_END_REGEX.finditer(clean_text):
        if match.group(1) == "." and _ends_with_abbreviation(
            clean_text[start : match.start()], clean_text[match.end() :], abbreviations
        ):
            continue

        sentences.append(clean_text[start : match.end()].strip())
        start = match.end()

    # Trailing text without terminal punctuation
    sentences.append(clean_text[start:].strip())

    return [s for s in sentences if WORD_CHAR_REGEX.search(s)]


def _ends_with_abbreviation(
    fragment: str, following: str, abbreviations: FrozenSet[str]
) -> bool:
    """Checks whether the period closing ``fragment`` belongs to an abbreviation.

    Args:
        fragment (str): Text of the current sentence up to the period.
        following (str): Text after the period.
        abbreviations (FrozenSet[str]): Lower-cased abbreviations without their
            final period.
    """
    match = LAST_WORD_REGEX.search(fragment)
    if not match:
        return False

    raw_word = match.group(1).lstrip("(\"'¿¡«")
    last_word = raw_word.lower()
    next_is_capitalized = _starts_capitalized(following)

    if len(last_word) == 1 and last_word.isalpha():
        # "J. R. Jiménez" is an initial, "la b. Luego..." is an answer letter
        return raw_word.isupper() or not next_is_capitalized

    if last_word in SENTENCE_FINAL_ABBREVIATIONS and next_is_capitalized:
        return False

    if last_word in abbreviations:
        return True

    # Two-part abbreviations ("p. ej", "EE. UU")
    two_words = " ".join(fragment.lower().split()[-2:])
    return two_words in abbreviations


def _starts_capitalized(text: str) -> bool:
    first_word = text.lstrip().lstrip("(\"'¿¡«")
    return bool(first_word) and first_word[0].isupper()
