from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from bson import ObjectId
from beanie import Document
from pydantic import BaseModel

from cipherdrive.utils.base import now_ms

ModelT = TypeVar("ModelT", bound=Document)
CreateSchemaT = TypeVar("CreateSchemaT", bound=BaseModel)
UpdateSchemaT = TypeVar("UpdateSchemaT", bound=BaseModel)


class BaseCRUD(Generic[ModelT, CreateSchemaT, UpdateSchemaT]):
    def __init__(self, model: Type[ModelT]):
        self.model = model

    def _is_soft_deletable(self) -> bool:
        return "deleted_at" in self.model.model_fields

    def _scope(self, filter_: Optional[Dict[str, Any]], include_deleted: bool) -> Dict[str, Any]:
        query = dict(filter_ or {})
        if not include_deleted and self._is_soft_deletable():
            query["deleted_at"] = None
        return query

    async def get_by_id(self, id: str) -> Optional[ModelT]:
        if not ObjectId.is_valid(id):
            return None
        return await self.model.find_one({"_id": ObjectId(id)})

    async def list(
        self,
        filter_: Optional[Dict[str, Any]] = None,
        limit: int = 0,
        skip: int = 0,
        include_deleted: bool = True,
        sort: Optional[str] = None,
    ) -> List[ModelT]:
        cursor = self.model.find(self._scope(filter_, include_deleted))
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list()

    async def count(self, filter_: Optional[Dict[str, Any]] = None, include_deleted: bool = True) -> int:
        return await self.model.find(self._scope(filter_, include_deleted)).count()

    async def create(self, obj_in: CreateSchemaT) -> ModelT:
        data = obj_in.model_dump()
        if self._is_soft_deletable():
            data.setdefault("deleted_at", None)
        db_obj = self.model(**data)
        await db_obj.insert()
        return db_obj

    async def update(
        self,
        db_obj: ModelT,
        obj_in: UpdateSchemaT | Dict[str, Any],
    ) -> ModelT:
        if isinstance(obj_in, BaseModel):
            update_data = obj_in.model_dump(exclude_unset=True)
        else:
            update_data = dict(obj_in)

        if "updated_at" in type(db_obj).model_fields:
            update_data["updated_at"] = now_ms()

        await db_obj.set(update_data)
        return db_obj

    async def soft_delete(self, db_obj: ModelT, deleted_at: Optional[int] = None) -> ModelT:
        if not self._is_soft_deletable():
            await db_obj.delete()
            return db_obj
        return await self.update(db_obj, {"deleted_at": deleted_at if deleted_at is not None else now_ms()})

    async def delete(self, db_obj: ModelT) -> None:
        await db_obj.delete()
