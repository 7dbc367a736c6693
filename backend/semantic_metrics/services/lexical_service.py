import re
from collections import Counter
from functools import lru_cache
from typing import Iterable, List, Set, Tuple
from semantic_metrics.core.config import DEFAULT_CONFIG, MetricsConfig
from semantic_metrics.schemas.analysis import (
    LexicalSummary,
    TextUnitLexicalDetail,
    VocabularyEntry,
)

# Anything that is neither a word character nor whitespace counts as punctuation,
# and so do underscores: "_____" blanks are exercise markup, not words
PUNCTUATION_REGEX = re.compile(r"[^\w\s]|_")


@lru_cache(maxsize=4096)
def tokenize(text: str) -> Tuple[str, ...]:
    """Lowercases, strips punctuation and splits a text on whitespace.

    Args:
        text (str): The text to tokenize.

    Returns:
        Tuple[str, ...]: Normalized tokens in order, without empty tokens.
    """
    return tuple(PUNCTUATION_REGEX.sub(" ", text.lower()).split())


class TokenTally:
    """Token counts of one or more texts.

    Backed by a Counter so tallies can be pooled: the unique types of a merged
    tally are the union of the merged vocabularies.
    """

    def __init__(self, tokens: Iterable[str] = ()):
        self.frequencies: Counter = Counter(tokens)

    @property
    def total_tokens(self) -> int:
        return sum(self.frequencies.values())

    @property
    def unique_types(self) -> Set[str]:
        return set(self.frequencies)

    @property
    def unique_type_count(self) -> int:
        return len(self.frequencies)

    def add(self, text: str) -> "TokenTally":
        self.frequencies.update(tokenize(text))
        return self

    def merge(self, other: "TokenTally") -> "TokenTally":
        self.frequencies.update(other.frequencies)
        return self

    def most_common(self, n: int) -> List[Tuple[str, int]]:
        return self.frequencies.most_common(n)

    def __repr__(self) -> str:
        return (
            f"TokenTally(total_tokens={self.total_tokens}, "
            f"unique_types={self.unique_type_count})"
        )


def tally(text: str) -> TokenTally:
    return TokenTally(tokenize(text))


def tally_units(texts: Iterable[str]) -> TokenTally:
    """Pools the tokens of several text units into one tally."""
    pooled = TokenTally()
    for text in texts:
        pooled.add(text)
    return pooled


def ttr(token_tally: TokenTally) -> float:
    """Type-Token Ratio: unique types / total tokens, 0 for an empty tally."""
    total = token_tally.total_tokens
    if total == 0:
        return 0.0
    return token_tally.unique_type_count / total


def richness_band(value: float, config: MetricsConfig = DEFAULT_CONFIG) -> str:
    """Maps a TTR to its display band (Alta, Media or Baja)."""
    for lower_bound, label in config.richness_bands:
        if value >= lower_bound:
            return label
    return config.fallback_richness_band


def average_ttr(tallies: Iterable[TokenTally]) -> float:
    """Arithmetic mean of the TTRs of the non-empty tallies."""
    values = [ttr(t) for t in tallies if t.total_tokens > 0]
    if not values:
        return 0.0
    return sum(values) / len(values)


def _preview(text: str, length: int) -> str:
    return text[:length] + ("..." if len(text) > length else "")


def measure(texts: List[str], config: MetricsConfig = DEFAULT_CONFIG) -> LexicalSummary:
    """Calculates the lexical richness of a resource's text units.

    Args:
        texts (List[str]): The text units of one resource.
        config (MetricsConfig): Richness bands and reporting sizes.

    Returns:
        LexicalSummary: Pooled TTR, mean per-unit TTR, per-unit details and
            the most frequent vocabulary.
    """
    unit_tallies = [tally(text) for text in texts]

    pooled = TokenTally()
    for unit_tally in unit_tallies:
        pooled.merge(unit_tally)

    details = [
        TextUnitLexicalDetail(
            text_index=index,
            preview=_preview(text, 50),
            tokens=unit_tally.total_tokens,
            types=unit_tally.unique_type_count,
            ttr=round(ttr(unit_tally), 3),
        )
        for index, (text, unit_tally) in enumerate(zip(texts, unit_tallies), start=1)
    ]

    pooled_ttr = ttr(pooled)

    return LexicalSummary(
        total_tokens=pooled.total_tokens,
        unique_types=pooled.unique_type_count,
        ttr=pooled_ttr,
        average_ttr=average_ttr(unit_tallies),
        richness_level=richness_band(pooled_ttr, config),
        details=details,
        vocabulary=[
            VocabularyEntry(word=word, frequency=count)
            for word, count in pooled.most_common(config.vocabulary_size)
        ],
    )
