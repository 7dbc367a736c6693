from semantic_metrics.core.config import MetricsConfig
from semantic_metrics.services import lexical_service
from semantic_metrics.services.lexical_service import (
    TokenTally,
    average_ttr,
    measure,
    richness_band,
    tally,
    tally_units,
    tokenize,
    ttr,
)

SCENARIO_A_TEXT = (
    "El gato subió al árbol. El perro ladró al gato. Los animales son interesantes."
)
SCENARIO_B_TEXT = "El gato come. El gato duerme. El gato juega. El gato camina."


def test_tokenize():
    """Test lowercasing, punctuation stripping and whitespace splitting."""
    assert tokenize("¡Hola, Mundo!  ¿Qué tal?") == ("hola", "mundo", "qué", "tal")
    assert tokenize("...") == ()
    assert tokenize("") == ()


def test_moderately_varied_text():
    """Test token, type and TTR counts of a moderately varied text."""
    summary = measure([SCENARIO_A_TEXT])

    assert summary.total_tokens == 14
    assert summary.unique_types == 11
    assert round(summary.ttr, 3) == 0.786
    assert summary.richness_level == "Media"


def test_repetitive_text():
    """Test a repetitive text has a low TTR and the lowest band."""
    summary = measure([SCENARIO_B_TEXT])

    assert summary.ttr < 0.7
    assert summary.ttr == 0.5
    assert summary.richness_level == "Baja"
    assert summary.vocabulary[0].word in ("el", "gato")
    assert summary.vocabulary[0].frequency == 4


def test_ttr_bounds():
    """Test TTR stays in [0, 1] and equals 1 when every token is distinct."""
    for text in ["", "uno", "uno dos tres", "a a a a", SCENARIO_A_TEXT]:
        value = ttr(tally(text))
        assert 0 <= value <= 1
    assert ttr(tally("uno dos tres")) == 1
    assert ttr(TokenTally()) == 0


def test_pooled_vs_averaged_ttr():
    """Test the pooled TTR of several units differs from the mean of their TTRs."""
    units = ["el gato", "el perro"]
    pooled = tally_units(units)

    assert pooled.total_tokens == 4
    assert pooled.unique_types == {"el", "gato", "perro"}
    assert ttr(pooled) == 0.75
    assert average_ttr([tally(u) for u in units]) == 1.0


def test_average_ttr_ignores_empty_units():
    """Test empty units do not drag the average TTR down."""
    assert average_ttr([tally("uno dos"), tally("...")]) == 1.0
    assert average_ttr([]) == 0.0


def test_merge_unions_vocabularies():
    """Test merging tallies adds token counts and unions the types."""
    merged = tally("el gato come").merge(tally("el perro come"))
    assert merged.total_tokens == 6
    assert merged.unique_type_count == 4
    assert merged.frequencies["el"] == 2


def test_measure_details():
    """Test per-unit details and the reported averages."""
    summary = measure(["Uno dos tres.", "Uno uno."])

    assert [d.text_index for d in summary.details] == [1, 2]
    assert summary.details[0].ttr == 1.0
    assert summary.details[1].ttr == 0.5
    assert summary.average_ttr == 0.75
    assert summary.total_tokens == 5
    assert summary.unique_types == 3
    assert summary.ttr == 0.6


def test_measure_empty():
    """Test measuring no text gives zeroes and the lowest band."""
    summary = measure([])
    assert summary.total_tokens == 0
    assert summary.ttr == 0
    assert summary.richness_level == "Baja"
    assert summary.vocabulary == []


def test_richness_bands():
    """Test band boundaries are inclusive lower bounds."""
    assert richness_band(0.8) == "Alta"
    assert richness_band(0.79) == "Media"
    assert richness_band(0.6) == "Media"
    assert richness_band(0.59) == "Baja"

    config = MetricsConfig(richness_bands=[(0.5, "Alta")], fallback_richness_band="Baja")
    assert richness_band(0.5, config) == "Alta"


def test_vocabulary_size_is_configurable():
    """Test only the most frequent words are reported."""
    config = MetricsConfig(vocabulary_size=2)
    summary = lexical_service.measure(["uno uno uno dos dos tres"], config)
    assert [(v.word, v.frequency) for v in summary.vocabulary] == [("uno", 3), ("dos", 2)]


def test_tokenize_ignores_blanks():
    """Test fill-in blanks are markup, not vocabulary."""
    assert tokenize("El ____ come. La ____ lee.") == ("el", "come", "la", "lee")

    summary = measure(["Completa: mi_____ es grande."])
    assert summary.total_tokens == 4
    assert all("_" not in entry.word for entry in summary.vocabulary)
