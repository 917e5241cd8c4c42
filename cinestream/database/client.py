"""Shared MongoDB connection for the Cinestream service.

A single motor client is opened on startup and every repository borrows its
collections from it.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from cinestream.core.exceptions import ConfigurationError


class CinestreamDB:
    """Owns the motor client used by the users and movies repositories.

    Nothing touches the network until :meth:`connect`; the lifespan hook of
    :class:`~cinestream.cinestream.CinestreamService` opens and closes it.

    Example:
        .. code-block:: python

            async with CinestreamDB("mongodb://localhost:27017", "cinestream") as store:
                await store.collection("movies").insert_one({"title": "Alien"})
    """

    def __init__(self, uri: str, db_name: str = "cinestream"):
        if not uri:
            raise ConfigurationError("MongoDB URI is not configured (set CINESTREAM__MONGO_URI)")
        self.uri = uri
        self.db_name = db_name
        self._motor: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None

    @property
    def client(self) -> Optional[AsyncIOMotorClient]:
        return self._motor

    @property
    def db(self) -> Optional[AsyncIOMotorDatabase]:
        """Handle on the ``db_name`` database, or None before :meth:`connect`."""
        return self._database

    @property
    def is_connected(self) -> bool:
        return self._motor is not None

    def collection(self, name: str) -> AsyncIOMotorCollection:
        if self._database is None:
            raise RuntimeError(f"Cannot open collection '{name}': CinestreamDB.connect() has not run")
        return self._database[name]

    async def connect(self) -> "CinestreamDB":
        """Open the client once; later calls reuse it."""
        if not self.is_connected:
            # tz_aware keeps reset-token expiries comparable with utcnow()
            self._motor = AsyncIOMotorClient(self.uri, tz_aware=True)
            self._database = self._motor[self.db_name]
        return self

    async def ping(self) -> bool:
        if not self.is_connected:
            return False
        await self._motor.admin.command("ping")
        return True

    async def disconnect(self) -> None:
        motor, self._motor, self._database = self._motor, None, None
        if motor is not None:
            motor.close()

    async def __aenter__(self) -> "CinestreamDB":
        return await self.connect()

    async def __aexit__(self, *exc_info) -> None:
        await self.disconnect()
