"""Generic MongoDB repository.

``MongoRepository`` gives any entity the same create/read/update/delete/list
operations. The entity's field rules live in the pydantic schema passed at
construction, never in the repository itself.
"""

from datetime import date, datetime, timezone
from typing import Annotated, Any, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

import pydantic
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, TypeAdapter
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from cinestream.core.exceptions import ConflictError, NotFoundError, ValidationError
from cinestream.models.base import DocumentModel, utcnow

T = TypeVar("T", bound=DocumentModel)

SortOrder = Sequence[Tuple[str, int]]


def to_object_id(value: Union[str, ObjectId, None]) -> Optional[ObjectId]:
    """Parse an id into an ObjectId, returning None when it is not one."""
    if isinstance(value, ObjectId):
        return value
    if value is None:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def to_bson(value: Any) -> Any:
    """Convert values BSON cannot store natively (plain dates) recursively."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, dict):
        return {k: to_bson(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_bson(v) for v in value]
    return value


def _format_errors(exc: pydantic.ValidationError) -> Tuple[str, List[Dict[str, Any]]]:
    errors = [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in exc.errors(include_url=False)
    ]
    message = "; ".join(f"{'.'.join(err['loc']) or 'body'}: {err['msg']}" for err in errors)
    return message, errors


class MongoRepository(Generic[T]):
    """
    Entity-agnostic persistence over one MongoDB collection.

    Args:
        collection: A motor collection (or anything exposing the same coroutine API).
        schema: The DocumentModel subclass that validates documents.
        default_sort: Sort applied by :meth:`get_all` when the caller gives none.

    Every operation round-trips to the store; nothing is cached between calls.

    Example:
        .. code-block:: python

            movies = MongoRepository(db.collection("movies"), Movie, default_sort=[("created_at", -1)])
            movie = await movies.create({"title": "Alien", "genre": "Sci-Fi", "releaseDate": "1979-05-25"})
            movie = await movies.update(movie.id, {"rating": 8.5})
            await movies.delete(movie.id)
    """

    def __init__(self, collection, schema: Type[T], *, default_sort: Optional[SortOrder] = None):
        self.collection = collection
        self.schema = schema
        self.default_sort = list(default_sort) if default_sort else None
        self._fields: Dict[str, str] = {}
        for name, field in schema.model_fields.items():
            if name == "id":
                continue
            self._fields[name] = name
            if field.alias:
                self._fields[field.alias] = name

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def create(self, data: Union[Mapping[str, Any], BaseModel]) -> T:
        """Validate ``data``, insert it and return the stored model with its id.

        Raises:
            ValidationError: Required fields missing or malformed.
            ConflictError: A unique index rejected the document.
        """
        model = self._validate(self._normalize(data))
        document = to_bson(model.model_dump(exclude={"id"}))
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError as e:
            raise ConflictError(self._duplicate_message(e))
        return model.model_copy(update={"id": str(result.inserted_id)})

    async def read(self, id: str) -> T:
        """Fetch a document by id.

        Raises:
            NotFoundError: No document has that id.
        """
        oid = self._require_object_id(id)
        doc = await self.collection.find_one({"_id": oid})
        if doc is None:
            raise NotFoundError(f"{self.schema.__name__} with id '{id}' not found")
        return self._to_model(doc)

    async def update(self, id: str, patch: Union[Mapping[str, Any], BaseModel]) -> T:
        """Apply a partial update, re-validating the merged document first.

        Only the patched fields (plus ``updated_at`` when the schema has it) are
        written, in a single ``find_one_and_update``.

        Raises:
            NotFoundError: No document has that id.
            ValidationError: The merged document violates the schema.
            ConflictError: A unique index rejected the change.
        """
        oid = self._require_object_id(id)
        changes = self._normalize(patch)

        current = await self.collection.find_one({"_id": oid})
        if current is None:
            raise NotFoundError(f"{self.schema.__name__} with id '{id}' not found")
        if not changes:
            return self._to_model(current)

        if "updated_at" in self.schema.model_fields:
            changes["updated_at"] = utcnow()

        merged = {**self._strip_id(current), **changes}
        model = self._validate(merged)
        update_doc = to_bson(model.model_dump(include=set(changes)))

        try:
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": update_doc},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise ConflictError(self._duplicate_message(e))
        if doc is None:
            raise NotFoundError(f"{self.schema.__name__} with id '{id}' not found")
        return self._to_model(doc)

    async def delete(self, id: str) -> T:
        """Remove a document by id and return it.

        Raises:
            NotFoundError: No document has that id.
        """
        oid = self._require_object_id(id)
        doc = await self.collection.find_one_and_delete({"_id": oid})
        if doc is None:
            raise NotFoundError(f"{self.schema.__name__} with id '{id}' not found")
        return self._to_model(doc)

    async def get_all(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        *,
        sort: Optional[SortOrder] = None,
    ) -> List[T]:
        """Return every document matching an equality filter (all documents by default).

        Filter keys may be wire aliases or field names; unknown keys are ignored.
        String values are coerced to the field's type, so query-string filters work.
        """
        query = self._build_query(filter or {})
        cursor = self.collection.find(query)
        order = sort if sort is not None else self.default_sort
        if order:
            cursor = cursor.sort(list(order))
        docs = await cursor.to_list(length=None)
        return [self._to_model(doc) for doc in docs]

    # -------------------------------------------------------------------------
    # Helpers for entity repositories
    # -------------------------------------------------------------------------

    async def find_one(self, filter: Mapping[str, Any]) -> Optional[T]:
        doc = await self.collection.find_one(dict(filter))
        return self._to_model(doc) if doc is not None else None

    async def count(self, filter: Optional[Mapping[str, Any]] = None) -> int:
        return await self.collection.count_documents(dict(filter or {}))

    def _to_model(self, doc: Mapping[str, Any]) -> T:
        data = self._strip_id(doc)
        data["id"] = str(doc["_id"])
        return self.schema.model_validate(data)

    @staticmethod
    def _strip_id(doc: Mapping[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in doc.items() if k != "_id"}

    def _normalize(self, data: Union[Mapping[str, Any], BaseModel, None]) -> Dict[str, Any]:
        """Map aliases to field names and drop unknown keys and ``id``."""
        if data is None:
            return {}
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        return {self._fields[k]: v for k, v in data.items() if k in self._fields}

    def _validate(self, data: Dict[str, Any]) -> T:
        try:
            return self.schema.model_validate(data)
        except pydantic.ValidationError as e:
            message, errors = _format_errors(e)
            raise ValidationError(message, errors=errors)

    def _build_query(self, filter: Mapping[str, Any]) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        for key, value in self._normalize(filter).items():
            if isinstance(value, str):
                try:
                    value = self._field_adapter(key).validate_python(value)
                except pydantic.ValidationError as e:
                    message, errors = _format_errors(e)
                    raise ValidationError(f"{key}: {message}", errors=errors)
            query[key] = to_bson(value)
        return query

    def _field_adapter(self, name: str) -> TypeAdapter:
        """Adapter for one field, including its Annotated validators and constraints."""
        field = self.schema.model_fields[name]
        if field.metadata:
            return TypeAdapter(Annotated[(field.annotation, *field.metadata)])
        return TypeAdapter(field.annotation)

    def _require_object_id(self, id: str) -> ObjectId:
        oid = to_object_id(id)
        if oid is None:
            raise NotFoundError(f"{self.schema.__name__} with id '{id}' not found")
        return oid

    @staticmethod
    def _duplicate_message(exc: DuplicateKeyError) -> str:
        key_value = (exc.details or {}).get("keyValue") or {}
        if key_value:
            fields = ", ".join(key_value)
            return f"A document with this {fields} already exists"
        return "Document already exists"
