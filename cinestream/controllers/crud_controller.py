"""Generic CRUD routes over a MongoRepository."""

from typing import Any, Callable, Dict, List, Optional, Type

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from cinestream.database.repository import MongoRepository
from cinestream.models.base import DocumentModel


class CrudController:
    """
    Expose list/create/read/update/delete for one entity under ``prefix``.

    Args:
        prefix: Route prefix, e.g. ``"/movies"``.
        repository: Zero-argument callable returning the repository. Resolved per
            request so the repository can be created after the database connects.
        create_model: Body model for ``POST {prefix}``.
        update_model: Body model for ``PUT {prefix}/{id}``; every field optional.
        response_model: Model each stored document is projected to.
        require_user: Auth dependency added to protected routes.
        public_reads: When True, the two GET routes need no token.

    Subclasses adjust payloads through :meth:`prepare_create` and
    :meth:`prepare_update` and add routes in :meth:`register_extra_routes`.
    """

    def __init__(
        self,
        *,
        prefix: str,
        repository: Callable[[], MongoRepository],
        create_model: Type[BaseModel],
        update_model: Type[BaseModel],
        response_model: Type[BaseModel],
        require_user: Callable,
        public_reads: bool = False,
        tags: Optional[List[str]] = None,
    ):
        self.prefix = prefix
        self.get_repository = repository
        self.create_model = create_model
        self.update_model = update_model
        self.response_model = response_model
        self.require_user = require_user
        self.public_reads = public_reads
        self.router = APIRouter(prefix=prefix, tags=tags or [prefix.strip("/").title()])

        # Fixed paths first, or "/{id}" would capture them
        self.register_extra_routes()
        self._register_crud_routes()

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    async def prepare_create(self, payload: BaseModel) -> Dict[str, Any]:
        return payload.model_dump()

    async def prepare_update(self, payload: BaseModel) -> Dict[str, Any]:
        return payload.model_dump(exclude_unset=True)

    def to_response(self, document: DocumentModel) -> BaseModel:
        return self.response_model.model_validate(document.model_dump())

    def register_extra_routes(self) -> None:
        pass

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def list(self, filters: Dict[str, Any]) -> List[BaseModel]:
        documents = await self.get_repository().get_all(filters)
        return [self.to_response(doc) for doc in documents]

    async def create(self, payload: BaseModel) -> BaseModel:
        document = await self.get_repository().create(await self.prepare_create(payload))
        return self.to_response(document)

    async def read(self, id: str) -> BaseModel:
        return self.to_response(await self.get_repository().read(id))

    async def update(self, id: str, payload: BaseModel) -> BaseModel:
        document = await self.get_repository().update(id, await self.prepare_update(payload))
        return self.to_response(document)

    async def delete(self, id: str) -> BaseModel:
        return self.to_response(await self.get_repository().delete(id))

    # -------------------------------------------------------------------------
    # Route registration
    # -------------------------------------------------------------------------

    def _register_crud_routes(self) -> None:
        create_model = self.create_model
        update_model = self.update_model
        protected = [Depends(self.require_user)]
        reads = [] if self.public_reads else protected

        async def list_items(request: Request):
            return await self.list(dict(request.query_params))

        async def create_item(payload: create_model):  # type: ignore[valid-type]
            return await self.create(payload)

        async def read_item(id: str):
            return await self.read(id)

        async def update_item(id: str, payload: update_model):  # type: ignore[valid-type]
            return await self.update(id, payload)

        async def delete_item(id: str):
            return await self.delete(id)

        self.router.add_api_route(
            "",
            list_items,
            methods=["GET"],
            response_model=List[self.response_model],
            dependencies=reads,
        )
        self.router.add_api_route(
            "",
            create_item,
            methods=["POST"],
            response_model=self.response_model,
            status_code=status.HTTP_201_CREATED,
            dependencies=protected,
        )
        self.router.add_api_route(
            "/{id}",
            read_item,
            methods=["GET"],
            response_model=self.response_model,
            dependencies=reads,
        )
        self.router.add_api_route(
            "/{id}",
            update_item,
            methods=["PUT", "PATCH"],
            response_model=self.response_model,
            dependencies=protected,
        )
        self.router.add_api_route(
            "/{id}",
            delete_item,
            methods=["DELETE"],
            response_model=self.response_model,
            dependencies=protected,
        )
