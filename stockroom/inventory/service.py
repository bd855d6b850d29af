"""
stockroom/inventory/service.py
------------------------------
Product operations: list, search, create, update, delete.

Validation failures raise ValidationError and missing targets raise
NotFound; the HTTP layer turns both into field-level responses.
Database faults surface as StoreError from the store.
"""
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from stockroom.errors import NotFound, ValidationError
from stockroom.inventory.models import ProductRecord
from stockroom.inventory.store import ProductStore
from stockroom.inventory.validators import parse_product_form, validate_product_form

_TICK = timedelta(microseconds=1)


class ProductService:

    def __init__(self, store: ProductStore,
                 clock: Callable[[], datetime] = datetime.utcnow):
        self.store = store
        self._clock = clock

    # ── Reads ─────────────────────────────────────────────────────
    def list(self) -> List[ProductRecord]:
        """All products, newest first. Queries the database on every call."""
        return self.store.fetch_all()

    def search(self, term: Optional[str]) -> List[ProductRecord]:
        """Case-insensitive substring match on name; blank term lists everything."""
        term = (term or '').strip()
        if not term:
            return self.list()
        return self.store.fetch_all(name_contains=term)

    def get(self, product_id: int) -> ProductRecord:
        product = self.store.fetch_one(product_id)
        if product is None:
            raise NotFound()
        return product

    # ── Writes ────────────────────────────────────────────────────
    def create(self, name, price, quantity=None) -> ProductRecord:
        data = self._clean(name, price, quantity)
        return self.store.insert(created_at=self._clock(), **data)

    def update(self, product_id: int, name, price, quantity=None) -> ProductRecord:
        current = self.get(product_id)
        data = self._clean(name, price, quantity)

        # updated_at must move forward even if the clock has not
        stamp = self._clock()
        floor = current.updated_at or current.created_at
        if floor is not None and stamp <= floor:
            stamp = floor + _TICK

        if not self.store.update(product_id, updated_at=stamp, **data):
            raise NotFound()   # deleted between the read and the write
        return self.get(product_id)

    def delete(self, product_id: int) -> None:
        """Idempotent: deleting a missing product is a no-op."""
        self.store.delete(product_id)

    @staticmethod
    def _clean(name, price, quantity) -> dict:
        form_data = {'name': name, 'price': price, 'quantity': quantity}
        errors = validate_product_form(form_data)
        if errors:
            raise ValidationError.from_errors(errors)
        return parse_product_form(form_data)
