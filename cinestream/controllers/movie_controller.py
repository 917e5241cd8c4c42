from typing import Callable

from cinestream.controllers.crud_controller import CrudController
from cinestream.models.movie import Movie, MovieCreate, MovieUpdate
from cinestream.repositories.movie_repository import MovieRepository


class MovieController(CrudController):
    """Movie CRUD. Anyone may browse; changes need a token."""

    def __init__(self, *, repository: Callable[[], MovieRepository], require_user: Callable):
        super().__init__(
            prefix="/movies",
            repository=repository,
            create_model=MovieCreate,
            update_model=MovieUpdate,
            response_model=Movie,
            require_user=require_user,
            public_reads=True,
            tags=["Movies"],
        )
