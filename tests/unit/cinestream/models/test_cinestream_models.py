"""Unit tests for wire models: camelCase aliases and field rules."""

from datetime import date, datetime, timezone

import pytest

from cinestream.models import Movie, MovieUpdate, ResetPasswordPayload, TokenResponse, User, UserCreate


class TestAliases:
    def test_movie_accepts_both_spellings(self):
        by_alias = Movie.model_validate({"title": "Heat", "genre": "Crime", "releaseDate": "1995-12-15"})
        by_name = Movie(title="Heat", genre="Crime", release_date="1995-12-15")
        assert by_alias.release_date == by_name.release_date

    def test_naive_release_date_is_utc(self):
        movie = Movie(title="Heat", genre="Crime", release_date=datetime(1995, 12, 15))
        assert movie.release_date.tzinfo == timezone.utc

    def test_dump_by_alias(self):
        dumped = TokenResponse(token="t").model_dump(by_alias=True)
        assert dumped == {"token": "t", "tokenType": "bearer", "message": "Login successful"}

    def test_reset_payload_uses_new_password_key(self):
        assert ResetPasswordPayload.model_validate({"newPassword": "abc"}).new_password == "abc"


class TestUserFields:
    def test_email_lower_cased(self):
        user = UserCreate(username="A", lastname="B", birthdate="2000-01-01", email="MiXeD@Example.COM", password="pw")
        assert user.email == "mixed@example.com"

    def test_birthdate_from_stored_datetime(self):
        user = User(
            username="A",
            lastname="B",
            birthdate=datetime(2000, 1, 1, tzinfo=timezone.utc),
            email="a@example.com",
            password="hash",
        )
        assert user.birthdate == date(2000, 1, 1)

    def test_password_byte_limit(self):
        with pytest.raises(ValueError):
            UserCreate(username="A", lastname="B", birthdate="2000-01-01", email="a@example.com", password="é" * 37)


class TestMovieFields:
    @pytest.mark.parametrize("rating", [0, 5.5, 10])
    def test_rating_bounds_inclusive(self, rating):
        assert Movie(title="T", genre="G", release_date="2000-01-01", rating=rating).rating == rating

    def test_duration_must_be_positive(self):
        with pytest.raises(ValueError):
            Movie(title="T", genre="G", release_date="2000-01-01", duration=0)

    def test_update_tracks_only_set_fields(self):
        assert MovieUpdate(rating=7).model_dump(exclude_unset=True) == {"rating": 7}
