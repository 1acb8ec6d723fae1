from yama.models import (
    CLIENT_ID_MAX_LENGTH,
    CatalogEntry,
    ExistingEntry,
    NewEntry,
    classify_entry,
    parse_entries,
)


def test_hero_image_defaults_to_image() -> None:
    entry = CatalogEntry.model_validate(
        {"title": "Dune", "image": "https://example.com/dune.jpg"}
    )
    assert entry.hero_image == "https://example.com/dune.jpg"

    explicit = CatalogEntry.model_validate(
        {
            "title": "Dune",
            "image": "https://example.com/dune.jpg",
            "heroImage": "https://example.com/dune-wide.jpg",
        }
    )
    assert explicit.hero_image == "https://example.com/dune-wide.jpg"


def test_payload_round_trips_camel_case_and_extra_fields() -> None:
    entry = CatalogEntry.model_validate(
        {"id": 17, "title": "Arrival", "streamId": "abc", "views": "12"}
    )
    payload = entry.to_payload()
    assert payload["streamId"] == "abc"
    assert payload["views"] == "12"
    assert payload["id"] == 17
    assert "stream_id" not in payload


def test_numeric_rating_and_blank_year_are_normalised() -> None:
    entry = CatalogEntry.model_validate({"rating": 9, "year": "", "duration": 120})
    assert entry.rating == "9"
    assert entry.duration == "120"
    assert entry.year is None


def test_missing_stream_is_not_an_error() -> None:
    assert CatalogEntry(title="Silent").has_stream is False
    assert CatalogEntry.model_validate({"streamId": "5d5bc37f"}).has_stream is True


def test_draft_uses_editor_defaults() -> None:
    draft = CatalogEntry.draft(title="Untitled Project")
    assert draft.id is None
    assert draft.type == "movie"
    assert draft.rating == "New"
    assert draft.category == "New Releases"
    assert draft.status == "ready"
    assert draft.seasons == []
    assert draft.title == "Untitled Project"


def test_classify_entry_uses_identifier_length() -> None:
    assert isinstance(classify_entry(CatalogEntry(title="Fresh")), NewEntry)
    assert isinstance(classify_entry(CatalogEntry(id=1700000000000)), ExistingEntry)
    assert isinstance(classify_entry(CatalogEntry(id="1234567890")), NewEntry)

    target = classify_entry(CatalogEntry(id="65f0c2a9e4b0a1d2c3f4e5a6"))
    assert isinstance(target, ExistingEntry)
    assert target.id == "65f0c2a9e4b0a1d2c3f4e5a6"


def test_matches_id_compares_string_forms() -> None:
    entry = CatalogEntry(id=1700000000000)
    assert entry.matches_id("1700000000000")
    assert entry.matches_id(1700000000000)
    assert not CatalogEntry().matches_id(None)


def test_parse_entries_skips_invalid_records() -> None:
    entries = parse_entries(
        [
            {"id": 1, "title": "Valid"},
            {"id": 2, "type": "podcast"},
            "not-a-record",
        ]
    )
    assert [entry.title for entry in entries] == ["Valid"]
    assert parse_entries({"movies": []}) == []


def test_client_ids_up_to_max_length_are_created() -> None:
    longest_client_id = "7" * CLIENT_ID_MAX_LENGTH
    assert isinstance(classify_entry(CatalogEntry(id=longest_client_id)), NewEntry)
    assert isinstance(
        classify_entry(CatalogEntry(id=longest_client_id + "7")), ExistingEntry
    )
