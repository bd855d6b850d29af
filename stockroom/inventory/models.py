from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from stockroom import db
from stockroom.inventory.validators import CENTS


class Product(db.Model):
    """Represents a product in the inventory."""
    __tablename__ = 'products'

    id          = db.Column(db.Integer, primary_key=True)
    name        = db.Column(db.String(200), nullable=False, index=True)
    price       = db.Column(db.Numeric(10, 2), nullable=False)   # NUMERIC(10,2), never float
    quantity    = db.Column('qty', db.Integer, nullable=False, default=0)
    created_at  = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at  = db.Column(db.DateTime, nullable=True)          # NULL until first update

    __table_args__ = (
        db.CheckConstraint('qty >= 0', name='check_qty_non_negative'),
        db.CheckConstraint('price >= 0', name='check_price_non_negative'),
    )

    def __repr__(self):
        return f"<Product {self.id} {self.name!r}>"


@dataclass(frozen=True)
class ProductRecord:
    """
    Typed, detached view of one products row.
    Services and templates only ever see these, never live ORM objects.
    """
    id: int
    name: str
    price: Decimal
    quantity: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, product: Product) -> 'ProductRecord':
        return cls(
            id=product.id,
            name=product.name,
            price=Decimal(str(product.price)).quantize(CENTS),
            quantity=product.quantity,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

    @property
    def display_price(self) -> str:
        """Always two fraction digits: 1.5 → '1.50'."""
        return f'{self.price:.2f}'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'price': self.display_price,
            'quantity': self.quantity,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
