"""
stockroom/inventory/store.py
────────────────────────────
Data store adapter for the products table.

Every statement goes through SQLAlchemy with bound parameters; user text
is never formatted into SQL. Each write is a single statement committed
on its own. Rows leave this module as ProductRecord, never as ORM objects.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, select, update

from stockroom.inventory.models import Product, ProductRecord
from stockroom.utils.db import store_errors


class ProductStore:

    def __init__(self, db):
        self._db = db

    @property
    def session(self):
        return self._db.session

    def fetch_all(self, name_contains: Optional[str] = None) -> List[ProductRecord]:
        """Newest first. `name_contains` filters case-insensitively."""
        stmt = select(Product).order_by(Product.id.desc())
        if name_contains:
            # autoescape: a literal % or _ in the term matches only itself
            stmt = stmt.where(Product.name.icontains(name_contains, autoescape=True))

        with store_errors(self.session, 'list products'):
            rows = self.session.scalars(stmt).all()
            return [ProductRecord.from_model(row) for row in rows]

    def fetch_one(self, product_id: int) -> Optional[ProductRecord]:
        with store_errors(self.session, 'load product'):
            product = self.session.get(Product, product_id, populate_existing=True)
            return ProductRecord.from_model(product) if product else None

    def insert(self, name: str, price: Decimal, quantity: int,
               created_at: datetime) -> ProductRecord:
        product = Product(
            name=name,
            price=price,
            quantity=quantity,
            created_at=created_at,
            updated_at=None,
        )
        with store_errors(self.session, 'create product'):
            self.session.add(product)
            self.session.flush()   # assigns the id
            record = ProductRecord.from_model(product)
            self.session.commit()
        return record

    def update(self, product_id: int, name: str, price: Decimal, quantity: int,
               updated_at: datetime) -> bool:
        """Single UPDATE ... WHERE id = :id. False when no row matched."""
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values({
                Product.name: name,
                Product.price: price,
                Product.quantity: quantity,
                Product.updated_at: updated_at,
            })
            .execution_options(synchronize_session=False)
        )
        with store_errors(self.session, 'update product'):
            result = self.session.execute(stmt)
            self.session.commit()
        return result.rowcount > 0

    def delete(self, product_id: int) -> int:
        """Returns the number of rows removed (0 or 1)."""
        stmt = (
            delete(Product)
            .where(Product.id == product_id)
            .execution_options(synchronize_session=False)
        )
        with store_errors(self.session, 'delete product'):
            result = self.session.execute(stmt)
            self.session.commit()
        return result.rowcount
