"""Suppliers referenced by inventory items."""

from typing import Any

from pydantic import ValidationError

from logistx.demo_data import demo_suppliers
from logistx.models import OperationResult, Supplier, SupplierCreate, SupplierPatch
from logistx.store.schema import SUPPLIERS
from logistx.viewmodels.base import EntityViewModel, validation_message


class SupplierViewModel(EntityViewModel[Supplier]):
    entity = "suppliers"
    table = SUPPLIERS
    model = Supplier
    order_by = "name"
    descending = False

    def demo_rows(self) -> list[Supplier]:
        return demo_suppliers()

    async def create_supplier(self, payload: SupplierCreate | dict[str, Any]) -> OperationResult:
        try:
            data = self._coerce(payload, SupplierCreate)
        except ValidationError as e:
            return self._invalid("create", validation_message(e))
        if not data.name.strip():
            return self._invalid("create", "Please fill in all required fields")
        values = {**data.values(), "name": data.name.strip()}

        async def action() -> OperationResult:
            rows = await self.store.insert(self.table, values)
            await self.load()
            return OperationResult.ok("Supplier added successfully!", data=self.find(rows[0]["id"]) or rows[0])

        return await self._run("create", action, "Failed to add supplier")

    async def update_supplier(self, supplier_id: str, patch: SupplierPatch | dict[str, Any]) -> OperationResult:
        try:
            data = self._coerce(patch, SupplierPatch)
        except ValidationError as e:
            return self._invalid("update", validation_message(e))
        values = data.values()
        if not values:
            return self._invalid("update", "Nothing to update")
        if "name" in values and not (values["name"] or "").strip():
            return self._invalid("update", "Please fill in all required fields")

        async def action() -> OperationResult:
            await self.store.update(self.table, values, filters={"id": supplier_id})
            await self.load()
            return OperationResult.ok("Supplier updated successfully!", data=self.find(supplier_id))

        return await self._run("update", action, "Failed to update supplier", supplier_id=supplier_id)

    async def delete_supplier(self, supplier_id: str) -> OperationResult:
        async def action() -> OperationResult:
            await self.store.delete(self.table, filters={"id": supplier_id})
            await self.load()
            return OperationResult.ok("Supplier deleted successfully!")

        return await self._run("delete", action, "Failed to delete supplier", supplier_id=supplier_id)

    def search(self, term: str = "") -> list[Supplier]:
        """Name or contact email substring match, case-insensitive."""
        needle = term.strip().lower()
        if not needle:
            return list(self.rows)
        return [
            s for s in self.rows
            if needle in s.name.lower() or needle in (s.contact_email or "").lower()
        ]
