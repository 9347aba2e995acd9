# storeit/platform/databases.py
import json
import logging
from typing import Dict, Iterable, Type

from sqlalchemy import JSON, String, cast, false, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from .. import config
from ..errors import InvalidQueryError, NotFoundError, PlatformError
from ..models import File, User, as_utc, utcnow
from .query import Query

logger = logging.getLogger(__name__)

# document attribute -> model column
ALIASES = {
    "$id": "id",
    "$createdAt": "createdAt",
    "$updatedAt": "updatedAt",
    "owner": "owner_id",
}
SYSTEM_COLUMNS = {"id", "createdAt", "updatedAt", "owner_id"}


def _collections() -> Dict[str, Type[SQLModel]]:
    return {
        config.USERS_COLLECTION_ID: User,
        config.FILES_COLLECTION_ID: File,
    }


def commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as error:
        db.rollback()
        raise PlatformError(str(error)) from error


def _timestamp(value) -> str:
    return as_utc(value).isoformat() if value else ""


class Databases:
    """Document collections backed by the SQLModel tables."""

    def __init__(self, db: Session):
        self.db = db

    def _model(self, collection_id: str) -> Type[SQLModel]:
        model = _collections().get(collection_id)
        if model is None:
            raise NotFoundError(f"Collection with the requested ID could not be found: {collection_id}")
        return model

    def _column(self, model: Type[SQLModel], attribute: str):
        name = ALIASES.get(attribute, attribute)
        if name not in model.__table__.columns:
            raise InvalidQueryError(f"Attribute not found in schema: {attribute}")
        return getattr(model, name)

    def _row(self, collection_id: str, document_id: str):
        row = self.db.get(self._model(collection_id), document_id)
        if row is None:
            raise NotFoundError("Document with the requested ID could not be found.")
        return row

    def _to_document(self, collection_id: str, row) -> dict:
        document = {
            "$id": row.id,
            "$collectionId": collection_id,
            "$createdAt": _timestamp(row.createdAt),
            "$updatedAt": _timestamp(row.updatedAt),
        }
        for column in row.__table__.columns:
            if column.key in SYSTEM_COLUMNS:
                continue
            value = getattr(row, column.key)
            document[column.key] = list(value) if isinstance(value, list) else value

        if isinstance(row, File):
            document["owner"] = (
                self._to_document(config.USERS_COLLECTION_ID, row.owner)
                if row.owner is not None
                else row.owner_id
            )
        return document

    def _condition(self, model: Type[SQLModel], query: Query):
        if query.method == "or":
            return or_(*(self._condition(model, sub) for sub in query.values))

        column = self._column(model, query.attribute)
        if not query.values:
            return false()

        if query.method == "equal":
            return column.in_(query.values)

        if query.method == "contains":
            if isinstance(column.expression.type, JSON):
                # list attribute: match a whole JSON-encoded element
                return or_(*(
                    cast(column, String).contains(json.dumps(value), autoescape=True)
                    for value in query.values
                ))
            return or_(*(column.contains(value, autoescape=True) for value in query.values))

        raise InvalidQueryError(f"Unsupported query method: {query.method}")

    def create_document(self, collection_id: str, document_id: str, data: dict) -> dict:
        model = self._model(collection_id)
        values = {ALIASES.get(key, key): value for key, value in data.items()}
        unknown = set(values) - set(model.__table__.columns.keys())
        if unknown:
            raise InvalidQueryError(f"Unknown attribute: {', '.join(sorted(unknown))}")

        row = model(id=document_id, **values)
        self.db.add(row)
        commit(self.db)
        self.db.refresh(row)
        logger.debug("Created document %s in %s", document_id, collection_id)
        return self._to_document(collection_id, row)

    def get_document(self, collection_id: str, document_id: str) -> dict:
        return self._to_document(collection_id, self._row(collection_id, document_id))

    def update_document(self, collection_id: str, document_id: str, data: dict) -> dict:
        model = self._model(collection_id)
        row = self._row(collection_id, document_id)
        for key, value in data.items():
            column = self._column(model, key)
            if column.key in SYSTEM_COLUMNS:
                raise InvalidQueryError(f"Attribute is read-only: {key}")
            setattr(row, column.key, value)
        row.updatedAt = utcnow()

        self.db.add(row)
        commit(self.db)
        self.db.refresh(row)
        return self._to_document(collection_id, row)

    def delete_document(self, collection_id: str, document_id: str) -> None:
        row = self._row(collection_id, document_id)
        self.db.delete(row)
        commit(self.db)
        logger.debug("Deleted document %s from %s", document_id, collection_id)

    def list_documents(self, collection_id: str, queries: Iterable[Query] = ()) -> dict:
        model = self._model(collection_id)
        queries = list(queries)

        statement = select(model)
        for query in queries:
            if query.is_filter:
                statement = statement.where(self._condition(model, query))

        counter = select(func.count()).select_from(statement.subquery())

        for query in queries:
            if query.method == "orderAsc":
                statement = statement.order_by(self._column(model, query.attribute).asc())
            elif query.method == "orderDesc":
                statement = statement.order_by(self._column(model, query.attribute).desc())
            elif query.method == "limit":
                statement = statement.limit(query.values[0])
            elif not query.is_filter:
                raise InvalidQueryError(f"Unsupported query method: {query.method}")

        try:
            total = self.db.exec(counter).one()
            rows = self.db.exec(statement).all()
        except SQLAlchemyError as error:
            raise PlatformError(str(error)) from error

        return {
            "total": total,
            "documents": [self._to_document(collection_id, row) for row in rows],
        }
