import re
from typing import Callable, Iterable, List, NamedTuple, Optional, Sequence
from semantic_metrics.schemas.analysis import GrammarSummary, SentenceRecord
from semantic_metrics.services.segmenter import segment

OPENING_MARKS = "¿¡\"'«("

# Third-person verb forms in (singular, plural) pairs
VERB_FORMS = [
    ("es", "son"),
    ("está", "están"),
    ("era", "eran"),
    ("fue", "fueron"),
    ("estaba", "estaban"),
    ("tiene", "tienen"),
    ("tenía", "tenían"),
    ("hace", "hacen"),
    ("va", "van"),
    ("viene", "vienen"),
    ("dice", "dicen"),
    ("puede", "pueden"),
    ("debe", "deben"),
    ("quiere", "quieren"),
    ("come", "comen"),
    ("vive", "viven"),
    ("juega", "juegan"),
    ("estudia", "estudian"),
    ("trabaja", "trabajan"),
    ("duerme", "duermen"),
    ("canta", "cantan"),
    ("baila", "bailan"),
    ("lee", "leen"),
    ("escribe", "escriben"),
    ("habla", "hablan"),
    ("camina", "caminan"),
    ("corre", "corren"),
    ("salta", "saltan"),
    ("ríe", "ríen"),
    ("llora", "lloran"),
    ("ama", "aman"),
    ("cuida", "cuidan"),
    ("enseña", "enseñan"),
    ("aprende", "aprenden"),
    ("mira", "miran"),
    ("escucha", "escuchan"),
    ("toca", "tocan"),
    ("ayuda", "ayudan"),
    ("cocina", "cocinan"),
    ("limpia", "limpian"),
    ("abre", "abren"),
    ("cierra", "cierran"),
    ("encuentra", "encuentran"),
    ("busca", "buscan"),
    ("da", "dan"),
    ("recibe", "reciben"),
    ("trae", "traen"),
    ("lleva", "llevan"),
    ("pone", "ponen"),
    ("compra", "compran"),
    ("vende", "venden"),
    ("gana", "ganan"),
    ("pierde", "pierden"),
    ("sirve", "sirven"),
    ("funciona", "funcionan"),
    ("empieza", "empiezan"),
    ("termina", "terminan"),
    ("sigue", "siguen"),
    ("regresa", "regresan"),
    ("llega", "llegan"),
    ("sale", "salen"),
    ("entra", "entran"),
    ("sube", "suben"),
]
SINGULAR_VERBS = frozenset(singular for singular, _ in VERB_FORMS)
PLURAL_VERBS = frozenset(plural for _, plural in VERB_FORMS)

SINGULAR_DETERMINERS = (
    "el|la|un|una|este|esta|ese|esa|aquel|aquella|mi|tu|su|nuestro|nuestra"
)
PLURAL_DETERMINERS = (
    "los|las|unos|unas|estos|estas|esos|esas|aquellos|aquellas"
    "|mis|tus|sus|nuestros|nuestras"
)

# Sentence-initial subject followed by the word that should be its verb
SINGULAR_SUBJECT_REGEX = re.compile(
    rf"^(?:(?:{SINGULAR_DETERMINERS})\s+(?P<noun>\w+)|él|ella|usted)\s+(?P<verb>\w+)"
)
PLURAL_SUBJECT_REGEX = re.compile(
    rf"^(?:(?:{PLURAL_DETERMINERS})\s+(?P<noun>\w+)|ellos|ellas|ustedes)\s+(?P<verb>\w+)"
)

# Nouns that usually open a time adverbial ("Un día fueron..."), not a subject
TIME_NOUNS = frozenset(
    {
        "día",
        "días",
        "mañana",
        "mañanas",
        "tarde",
        "tardes",
        "noche",
        "noches",
        "semana",
        "semanas",
        "mes",
        "meses",
        "año",
        "años",
        "vez",
        "veces",
        "lunes",
        "martes",
        "miércoles",
        "jueves",
        "viernes",
        "sábado",
        "sábados",
        "domingo",
        "domingos",
        "verano",
        "veranos",
        "invierno",
        "inviernos",
        "otoño",
        "primavera",
    }
)

DOUBLED_ARTICLE_REGEX = re.compile(r"\b(el la|la el|un una|una un|los las|las los)\b")
REPEATED_WORD_REGEX = re.compile(r"\b(\w+)\s+\1\b")
# Four or more identical letters or punctuation marks in a row, or stray symbols.
# Blanks ("_____") and placeholders ("[algo]") are exercise markup, not noise.
NOISE_REGEX = re.compile(r"([^\W\d_]|[!?.,])\1{3,}|[@#^<>{}|~`\\]")


class GrammarRule(NamedTuple):
    """A named grammar check. ``passes`` returns False when the rule is violated."""

    name: str
    passes: Callable[[str], bool]
    description: str = ""


def _strip_opening(sentence: str) -> str:
    return sentence.strip().lstrip(OPENING_MARKS + " ")


def _starts_with_capital(sentence: str) -> bool:
    stripped = _strip_opening(sentence)
    if not stripped:
        return True
    return stripped[0].isupper() or stripped[0].isdigit()


def _has_balanced_punctuation(sentence: str) -> bool:
    return (
        sentence.count("¿") == sentence.count("?")
        and sentence.count("¡") == sentence.count("!")
        and sentence.count("(") == sentence.count(")")
        and sentence.count("«") == sentence.count("»")
        and sentence.count('"') % 2 == 0
    )


def _has_no_noise(sentence: str) -> bool:
    return NOISE_REGEX.search(sentence) is None


def _has_no_doubled_article(sentence: str) -> bool:
    return DOUBLED_ARTICLE_REGEX.search(sentence.lower()) is None


def _has_no_repeated_word(sentence: str) -> bool:
    return REPEATED_WORD_REGEX.search(sentence.lower()) is None


def _subject_verb_agree(sentence: str) -> bool:
    normalized = _strip_opening(sentence).lower()

    for regex, mismatched_verbs in (
        (PLURAL_SUBJECT_REGEX, SINGULAR_VERBS),
        (SINGULAR_SUBJECT_REGEX, PLURAL_VERBS),
    ):
        match = regex.match(normalized)
        if not match or match.group("noun") in TIME_NOUNS:
            continue
        if match.group("verb") in mismatched_verbs:
            return False

    return True


DEFAULT_RULES = (
    GrammarRule(
        "capitalization",
        _starts_with_capital,
        "La oración debe comenzar con mayúscula",
    ),
    GrammarRule(
        "punctuation_balance",
        _has_balanced_punctuation,
        "Signos de interrogación, exclamación, paréntesis o comillas sin cerrar",
    ),
    GrammarRule(
        "character_noise",
        _has_no_noise,
        "Caracteres repetidos o símbolos fuera de lugar",
    ),
    GrammarRule(
        "doubled_article",
        _has_no_doubled_article,
        "Dos artículos consecutivos",
    ),
    GrammarRule(
        "repeated_word",
        _has_no_repeated_word,
        "Palabra repetida de forma consecutiva",
    ),
    GrammarRule(
        "subject_verb_agreement",
        _subject_verb_agree,
        "Discordancia de número entre sujeto y verbo",
    ),
)


def grammatical_percentage(correct: int, total: int) -> float:
    """Percentage of correct sentences, 0 when there are no sentences."""
    if total == 0:
        return 0.0
    return 100 * correct / total


class GrammarChecker:
    """Classifies sentences against an ordered list of GrammarRule objects.

    The first violated rule is reported; a sentence violating none is correct.
    """

    def __init__(self, rules: Sequence[GrammarRule] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def first_violation(self, sentence: str) -> Optional[str]:
        for rule in self.rules:
            if not rule.passes(sentence):
                return rule.name
        return None

    def check(self, sentence: str) -> SentenceRecord:
        violated = self.first_violation(sentence)
        return SentenceRecord(
            text=sentence, is_correct=violated is None, violated_rule=violated
        )

    def check_all(self, sentences: Iterable[str]) -> GrammarSummary:
        """Checks every sentence and summarizes the result.

        Args:
            sentences (Iterable[str]): Sentences to check.

        Returns:
            GrammarSummary: Counts, percentage and per-sentence records.
        """
        details = [self.check(sentence) for sentence in sentences]
        correct = sum(1 for record in details if record.is_correct)

        return GrammarSummary(
            total_sentences=len(details),
            correct_sentences=correct,
            incorrect_sentences=len(details) - correct,
            percentage=grammatical_percentage(correct, len(details)),
            details=details,
        )

    def check_texts(self, texts: Iterable[str]) -> GrammarSummary:
        """Segments each text unit and checks all resulting sentences."""
        sentences: List[str] = []
        for text in texts:
            sentences.extend(segment(text))
        return self.check_all(sentences)
