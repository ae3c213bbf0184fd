import logging

from sculpture_guide.enrichment import SculptureEnricher, format_sculptures


def test_named_sculpture_yields_fact_sheet(store):
    context = SculptureEnricher(store).enrich("tell me about Charles the fourth")
    assert context is not None
    assert context.startswith('I found information about "Charles the fourth"')
    assert "Name: Charles the fourth" in context
    assert "Year: between 1375 - 1378" in context


def test_unrelated_message_yields_nothing(store):
    assert SculptureEnricher(store).enrich("What is the weather today?") is None


def test_longest_mentioned_name_wins(make_store):
    store = make_store(
        [
            {"name": "Madonna", "year": "1400"},
            {"name": "Madonna of Krumlov", "year": "around 1390"},
        ]
    )
    context = SculptureEnricher(store).enrich("Describe the MADONNA OF KRUMLOV please")
    assert "Name: Madonna of Krumlov" in context
    assert "Year: around 1390" in context
    assert "Year: 1400" not in context


def test_fallback_search_formats_all_matches(make_store):
    store = make_store([{"name": "Madonna of Krumlov"}, {"name": "Krumlov pieta"}])
    context = SculptureEnricher(store).enrich("  Krumlov ")
    assert context.startswith("I found some relevant sculptures")
    assert "Name: Madonna of Krumlov\n\nName: Krumlov pieta" in context


def test_format_orders_labels():
    from sculpture_guide.data.models import SculptureRecord

    record = SculptureRecord(
        name="Bust",
        dimensions="50 cm",
        artist="Parler",
        year="1380",
        style="Gothic",
    )
    assert format_sculptures([record]) == "Name: Bust\nYear: 1380\nArtist: Parler\nDimensions: 50 cm"


def test_internal_errors_are_logged_not_raised(store, monkeypatch, caplog):
    def boom(**kwargs):
        raise RuntimeError("search broke")

    monkeypatch.setattr(store, "search", boom)
    with caplog.at_level(logging.ERROR):
        assert SculptureEnricher(store).enrich("nothing named here") is None
    assert any(record.message == "enrichment_failed" for record in caplog.records)
