from cinestream.database.indexes import MOVIES
from cinestream.database.repository import MongoRepository
from cinestream.models.movie import Movie


class MovieRepository(MongoRepository[Movie]):
    """Movies collection. Listings come back newest first."""

    collection_name = MOVIES

    def __init__(self, collection):
        super().__init__(collection, Movie, default_sort=[("created_at", -1)])
