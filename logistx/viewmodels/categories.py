"""Categories: display groupings referenced by inventory items."""

from typing import Any

from pydantic import ValidationError

from logistx.demo_data import demo_categories
from logistx.models import Category, CategoryCreate, CategoryPatch, OperationResult
from logistx.store.schema import CATEGORIES
from logistx.viewmodels.base import EntityViewModel, validation_message


class CategoryViewModel(EntityViewModel[Category]):
    entity = "categories"
    table = CATEGORIES
    model = Category
    order_by = "name"
    descending = False

    def demo_rows(self) -> list[Category]:
        return demo_categories()

    def find_by_name(self, name: str) -> Category | None:
        key = name.strip().lower()
        return next((c for c in self.rows if c.name.lower() == key), None)

    async def create_category(self, payload: CategoryCreate | dict[str, Any]) -> OperationResult:
        try:
            data = self._coerce(payload, CategoryCreate)
        except ValidationError as e:
            return self._invalid("create", validation_message(e))
        if not data.name.strip():
            return self._invalid("create", "Please fill in all required fields")
        values = {**data.values(), "name": data.name.strip()}

        async def action() -> OperationResult:
            rows = await self.store.insert(self.table, values)
            await self.load()
            return OperationResult.ok("Category added successfully!", data=self.find(rows[0]["id"]) or rows[0])

        return await self._run("create", action, "Failed to add category")

    async def update_category(self, category_id: str, patch: CategoryPatch | dict[str, Any]) -> OperationResult:
        try:
            data = self._coerce(patch, CategoryPatch)
        except ValidationError as e:
            return self._invalid("update", validation_message(e))
        values = data.values()
        if not values:
            return self._invalid("update", "Nothing to update")
        if "name" in values and not (values["name"] or "").strip():
            return self._invalid("update", "Please fill in all required fields")

        async def action() -> OperationResult:
            await self.store.update(self.table, values, filters={"id": category_id})
            await self.load()
            return OperationResult.ok("Category updated successfully!", data=self.find(category_id))

        return await self._run("update", action, "Failed to update category", category_id=category_id)

    async def delete_category(self, category_id: str) -> OperationResult:
        async def action() -> OperationResult:
            await self.store.delete(self.table, filters={"id": category_id})
            await self.load()
            return OperationResult.ok("Category deleted successfully!")

        return await self._run("delete", action, "Failed to delete category", category_id=category_id)
