"""角色实体与响应信封单元测试。"""

import pytest
from pydantic import ValidationError

from charfeed.modules.characters.domain.entities import (
    Character,
    CharacterCategory,
    CharacterEnvelope,
    CharacterPage,
    PageInfo,
)
from tests.fakes import make_character_payload, make_page_payload


class TestCharacterDecoding:
    def test_decodes_wire_field_names(self, sample_character_data):
        character = Character.model_validate(sample_character_data)

        assert character.id == 308
        assert character.name == "Mickey Mouse"
        assert character.image_url == "https://static.test/images/308.png"
        assert character.short_films == ("Steamboat Willie",)
        assert character.park_attractions == ("Mickey's PhilharMagic",)
        assert character.created_at is not None
        assert character.created_at.year == 2021

    def test_missing_sequences_default_to_empty(self):
        character = Character.model_validate(
            {"_id": 1, "name": "Nobody", "url": "https://api.test/characters/1"}
        )
        assert character.films == ()
        assert character.enemies == ()
        assert character.image_url is None

    def test_malformed_timestamp_becomes_none(self):
        character = Character.model_validate(
            make_character_payload(1, createdAt="last tuesday", updatedAt=None)
        )
        assert character.created_at is None
        assert character.updated_at is None

    def test_page_survives_one_malformed_timestamp(self):
        page = CharacterPage.model_validate(
            make_page_payload(
                [make_character_payload(1), make_character_payload(2, updatedAt="n/a")]
            )
        )
        assert [c.id for c in page.data] == [1, 2]
        assert page.data[0].updated_at is not None
        assert page.data[1].updated_at is None

    def test_missing_required_field_fails(self):
        payload = make_character_payload(1)
        del payload["url"]
        with pytest.raises(ValidationError):
            Character.model_validate(payload)

    def test_character_is_immutable(self, sample_character_data):
        character = Character.model_validate(sample_character_data)
        with pytest.raises(ValidationError):
            character.name = "Mortimer Mouse"


class TestDerivedFields:
    def test_total_appearances_counts_screen_categories_only(self, sample_character_data):
        character = Character.model_validate(sample_character_data)
        # films 2 + short films 1 + tv 1 + games 1；乐园与盟友不计入
        assert character.total_appearances == 5

    @pytest.mark.parametrize(
        ("overrides", "expected"),
        [
            ({"films": ["A"], "tvShows": ["B"]}, "Films"),
            ({"tvShows": ["B"], "shortFilms": ["C"]}, "TV Shows"),
            ({"shortFilms": ["C"], "videoGames": ["D"]}, "Short Films"),
            ({"videoGames": ["D"]}, "Video Games"),
            ({"parkAttractions": ["E"], "allies": ["F"]}, "Other"),
        ],
    )
    def test_primary_category_priority(self, overrides, expected):
        character = Character.model_validate(make_character_payload(1, **overrides))
        assert character.primary_category == expected

    def test_has_image(self):
        assert Character.model_validate(make_character_payload(1)).has_image is True
        assert Character.model_validate(make_character_payload(2, imageUrl="")).has_image is False
        assert Character.model_validate(make_character_payload(3, imageUrl=None)).has_image is False

    def test_category_sections_in_detail_order(self, sample_character_data):
        character = Character.model_validate(sample_character_data)
        sections = character.category_sections()

        assert [s.title for s in sections] == [
            "Films",
            "TV Shows",
            "Short Films",
            "Video Games",
            "Park Attractions",
            "Allies",
            "Enemies",
        ]
        allies = sections[5]
        assert allies.category is CharacterCategory.ALLIES
        assert allies.count == 2

    def test_empty_section_message(self):
        character = Character.model_validate(make_character_payload(1, "Pluto"))
        films = character.category_sections()[0]
        assert films.is_empty
        assert films.empty_message(character.name) == "Pluto doesn't appear in any films."


class TestEnvelopes:
    def test_page_count_defaults_to_one(self):
        assert PageInfo(count=3).page_count == 1
        assert PageInfo(total_pages=4, count=3).page_count == 4

    def test_list_envelope(self):
        payload = make_page_payload(
            [make_character_payload(1), make_character_payload(2)],
            total_pages=149,
            next_page="https://api.test/character?page=2&pageSize=2",
        )
        page = CharacterPage.model_validate(payload)

        assert [c.id for c in page.data] == [1, 2]
        assert page.info.total_pages == 149
        assert page.info.next_page is not None

    def test_single_object_is_wrapped_into_list(self):
        payload = {"info": {"count": 1}, "data": make_character_payload(9, "Stitch")}
        page = CharacterPage.model_validate(payload)

        assert len(page.data) == 1
        assert page.data[0].name == "Stitch"
        assert page.info.page_count == 1

    def test_detail_envelope(self, sample_character_data):
        envelope = CharacterEnvelope.model_validate(
            {"info": {"count": 1}, "data": sample_character_data}
        )
        assert envelope.data.id == 308
