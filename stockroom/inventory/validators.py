"""
stockroom/inventory/validators.py
---------------------------------
Pure-Python validation for product data.
Returns a dict of field -> error_message.
An empty dict means all fields are valid.

Values may arrive as form strings or as JSON scalars.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

MAX_NAME_LENGTH = 200
MAX_PRICE = Decimal('99999999.99')   # NUMERIC(10, 2)
MAX_QUANTITY = 2**31 - 1             # INTEGER
CENTS = Decimal('0.01')


def _text(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


def _to_decimal(value):
    if isinstance(value, bool):
        raise InvalidOperation
    return Decimal(_text(value))


def _to_int(value) -> int:
    if isinstance(value, bool):
        raise ValueError
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError
        return int(value)
    return int(_text(value))


def validate_product_form(form_data: dict) -> dict:
    """
    Validate raw data for create / update product.

    Args:
        form_data: dict with 'name', 'price' and optional 'quantity'

    Returns:
        dict of {field_name: error_message} — empty if all valid.
    """
    errors = {}

    # ── name ─────────────────────────────────────────────────────
    name = _text(form_data.get('name'))
    if not name:
        errors['name'] = 'Product name is required.'
    elif len(name) > MAX_NAME_LENGTH:
        errors['name'] = f'Product name must be {MAX_NAME_LENGTH} characters or fewer.'

    # ── price ─────────────────────────────────────────────────────
    price_raw = form_data.get('price')
    if not _text(price_raw):
        errors['price'] = 'Price is required.'
    else:
        try:
            price = _to_decimal(price_raw)
            if not price.is_finite():
                errors['price'] = 'Price must be a valid number.'
            elif price < 0:
                errors['price'] = 'Price cannot be negative.'
            elif price.quantize(CENTS, rounding=ROUND_HALF_UP) > MAX_PRICE:
                errors['price'] = 'Price is too large.'
        except InvalidOperation:
            errors['price'] = 'Price must be a valid number.'

    # ── quantity (optional, defaults to 0) ───────────────────────
    qty_raw = form_data.get('quantity')
    if _text(qty_raw):
        try:
            qty = _to_int(qty_raw)
            if qty < 0:
                errors['quantity'] = 'Quantity cannot be negative.'
            elif qty > MAX_QUANTITY:
                errors['quantity'] = 'Quantity is too large.'
        except ValueError:
            errors['quantity'] = 'Quantity must be a whole number.'

    return errors


def parse_product_form(form_data: dict) -> dict:
    """
    Convert validated raw values to correct Python types.
    Call only after validate_product_form returns no errors.
    """
    qty_raw = form_data.get('quantity')
    return {
        'name':     _text(form_data.get('name')),
        'price':    _to_decimal(form_data.get('price')).quantize(CENTS, rounding=ROUND_HALF_UP),
        'quantity': _to_int(qty_raw) if _text(qty_raw) else 0,
    }
