"""Tests for the movies collection service.

Operations take parameter bags the way a caller sends them and raise
ServiceError subclasses carrying an HTTP-equivalent code.
"""

from datetime import datetime, timezone

import pytest

from moviedb.errors import EntityNotFoundError, ValidationError


def violation_types(exc_info):
    return {v["type"] for v in exc_info.value.data}


class TestMoviesCreate:
    """Test movies.create."""

    def test_without_parameters(self, movies):
        with pytest.raises(ValidationError) as exc_info:
            movies.create({})
        assert exc_info.value.code == 422

    def test_without_mandatory_fields(self, movies):
        with pytest.raises(ValidationError) as exc_info:
            movies.create({"description": "Movie Description"})
        assert "required" in violation_types(exc_info)

    @pytest.mark.parametrize(
        "params, expected",
        [
            ({"name": "Movie Title", "description": 2}, "string"),
            ({"name": "Movie Title", "releaseDate": "noDate"}, "date"),
            ({"name": "Movie Title", "duration": "string"}, "number"),
            ({"name": "Movie Title", "rating": "string"}, "number"),
            ({"name": "Movie Title", "genres": [1]}, "string"),
        ],
    )
    def test_wrong_types(self, movies, params, expected):
        with pytest.raises(ValidationError) as exc_info:
            movies.create(params)
        assert exc_info.value.code == 422
        assert expected in violation_types(exc_info)

    def test_rejected_create_stores_nothing(self, movies):
        with pytest.raises(ValidationError):
            movies.create({"name": "Movie Title", "rating": 42})
        assert movies.count() == 0

    def test_simple_movie(self, movies):
        movie = movies.create({"name": "Movie name"})
        assert movie["_id"]
        assert movie["name"] == "Movie name"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("duration", 5),
            ("rating", 5),
            ("genres", ["1"]),
            ("genres", ["1", "2"]),
        ],
    )
    def test_optional_fields_round_trip(self, movies, field, value):
        movie = movies.create({"name": "Movie name", field: value})
        assert movie[field] == value

    def test_release_date_normalized(self, movies):
        released = datetime(2021, 6, 1, 20, 0, tzinfo=timezone.utc)
        movie = movies.create({"name": "Movie name", "releaseDate": released})
        assert datetime.fromisoformat(movie["releaseDate"].replace("Z", "+00:00")) == released

    def test_full_creation(self, movies):
        movie = movies.create(
            {
                "name": "Movie name",
                "description": "Movie description",
                "genres": ["1", "2"],
                "duration": 5,
                "rating": 4,
                "releaseDate": datetime.now(timezone.utc),
            }
        )
        assert set(movie) == {"_id", "name", "description", "genres", "duration", "rating", "releaseDate"}


class TestMoviesGet:
    """Test movies.get."""

    def test_without_parameters(self, seeded):
        with pytest.raises(ValidationError) as exc_info:
            seeded["movies"].get({})
        assert exc_info.value.code == 422

    def test_entity_not_found(self, seeded):
        with pytest.raises(EntityNotFoundError) as exc_info:
            seeded["movies"].get({"populate": [], "fields": ["_id"], "id": 99})
        assert exc_info.value.code == 404

    def test_get_matches_list_row(self, seeded):
        fields = ["_id", "name", "description"]
        listed = seeded["movies"].list({"populate": [], "fields": fields, "searchFields": []})
        assert listed["total"] == 5

        first = listed["rows"][0]
        movie = seeded["movies"].get({"populate": [], "fields": fields, "id": first["_id"]})
        assert movie == first

    def test_populate_genres(self, seeded):
        movie = seeded["movies"].get(
            {"populate": ["genres"], "fields": ["_id", "name", "description", "genres"], "id": "1"}
        )
        assert set(movie) == {"_id", "name", "description", "genres"}
        assert [g["title"] for g in movie["genres"]] == ["Romantic", "Drama", "Action"]
        assert all(set(g) == {"title", "_id"} for g in movie["genres"])

    def test_populate_as_string(self, seeded):
        movie = seeded["movies"].get({"populate": "genres", "fields": "_id,genres", "id": "2"})
        assert movie == {"_id": "2", "genres": [{"title": "Thriller", "_id": "4"}]}

    def test_only_id(self, seeded):
        assert seeded["movies"].get({"fields": ["_id"], "id": "3"}) == {"_id": "3"}


class TestMoviesList:
    """Test movies.list."""

    def test_without_parameters(self, seeded):
        with pytest.raises(ValidationError) as exc_info:
            seeded["movies"].list({})
        assert exc_info.value.code == 422

    def test_five_movies_with_fields(self, seeded):
        result = seeded["movies"].list(
            {"populate": [], "fields": ["_id", "name", "description"], "searchFields": []}
        )
        assert result["total"] == 5
        assert set(result["rows"][0]) == {"_id", "name", "description"}

    def test_search_name(self, seeded):
        result = seeded["movies"].list(
            {"populate": [], "fields": ["_id", "name"], "searchFields": ["name"], "search": "2"}
        )
        assert result["total"] == 1
        assert result["rows"] == [{"_id": "2", "name": "movieName2"}]

    def test_pagination(self, seeded):
        result = seeded["movies"].list(
            {"fields": ["_id"], "searchFields": [], "page": 3, "pageSize": 2}
        )
        assert result["rows"] == [{"_id": "5"}]
        assert result["total"] == 5
        assert result["page"] == 3
        assert result["pageSize"] == 2
        assert result["totalPages"] == 3

    def test_page_size_capped(self, seeded):
        result = seeded["movies"].list({"fields": [], "searchFields": [], "pageSize": 1000})
        assert result["pageSize"] == 100

    def test_sort_by_rating(self, seeded):
        result = seeded["movies"].list({"fields": ["_id"], "searchFields": [], "sort": "-rating"})
        assert [row["_id"] for row in result["rows"]] == ["1", "5", "4", "2", "3"]

    def test_list_populates(self, seeded):
        result = seeded["movies"].list(
            {"fields": ["_id", "genres"], "searchFields": [], "populate": ["genres"]}
        )
        assert result["rows"][1]["genres"] == [{"title": "Thriller", "_id": "4"}]


class TestMoviesFindAndCount:
    """Test movies.find and movies.count."""

    def test_find_with_limit_offset(self, seeded):
        rows = seeded["movies"].find({"fields": ["_id"], "limit": 2, "offset": 2})
        assert rows == [{"_id": "3"}, {"_id": "4"}]

    def test_find_by_query(self, seeded):
        rows = seeded["movies"].find({"query": {"rating": 4}, "fields": ["name"]})
        assert rows == [{"name": "movieName2"}]

    def test_count_search(self, seeded):
        assert seeded["movies"].count({"search": "movie", "searchFields": ["name"]}) == 5
        assert seeded["movies"].count() == 5


class TestMoviesUpdate:
    """Test movies.update."""

    def test_update_rating(self, seeded):
        movie = seeded["movies"].update({"id": "1", "rating": 9})
        assert movie["rating"] == 9
        assert seeded["movies"].get({"id": "1"})["rating"] == 9

    def test_invalid_update_rejected(self, seeded):
        with pytest.raises(ValidationError) as exc_info:
            seeded["movies"].update({"id": "1", "rating": 11})
        assert "number" in violation_types(exc_info)
        assert seeded["movies"].get({"id": "1"})["rating"] == 8

    def test_update_release_date_by_field_name(self, seeded):
        movie = seeded["movies"].update({"id": "1", "releaseDate": "2020-01-31"})
        assert movie["releaseDate"].startswith("2020-01-31T00:00:00")

    def test_update_ignores_python_attribute_names(self, seeded):
        """Changes are accepted under the entity's field names only."""
        before = seeded["movies"].get({"id": "1"})["releaseDate"]
        movie = seeded["movies"].update({"id": "1", "release_date": "2020-01-31"})
        assert movie["releaseDate"] == before
        assert "release_date" not in movie

    def test_update_unknown_id(self, seeded):
        with pytest.raises(EntityNotFoundError):
            seeded["movies"].update({"id": "99", "rating": 1})

    def test_update_without_id(self, seeded):
        with pytest.raises(ValidationError):
            seeded["movies"].update({"rating": 1})

    def test_update_without_changes_returns_entity(self, seeded):
        assert seeded["movies"].update({"id": "1"})["name"] == "movieName"


class TestMoviesRemove:
    """Test movies.remove."""

    def test_without_parameters(self, seeded):
        with pytest.raises(ValidationError) as exc_info:
            seeded["movies"].remove({})
        assert exc_info.value.code == 422

    def test_movie_not_found(self, seeded):
        with pytest.raises(EntityNotFoundError) as exc_info:
            seeded["movies"].remove({"populate": [], "fields": [], "searchFields": [], "id": "99"})
        assert exc_info.value.code == 404

    def test_delete_movie(self, seeded):
        listed = seeded["movies"].list(
            {"populate": [], "fields": ["_id", "name", "description"], "searchFields": []}
        )
        assert listed["total"] == 5
        movie_id = listed["rows"][0]["_id"]

        assert seeded["movies"].remove({"populate": [], "fields": [], "id": movie_id}) == 1

        with pytest.raises(EntityNotFoundError):
            seeded["movies"].get({"populate": [], "fields": [], "id": movie_id})
        assert seeded["movies"].count() == 4
