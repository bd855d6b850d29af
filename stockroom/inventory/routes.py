from flask import (
    abort, current_app, flash, g, jsonify, redirect, render_template, request, url_for,
)
from stockroom.auth.decorators import login_required
from stockroom.context import get_services
from stockroom.errors import NotFound, ValidationError
from stockroom.inventory import inventory
from stockroom.utils.http import json_error, request_data, wants_json


def _product_fields(data: dict) -> dict:
    """name / price / quantity from a submission; `qty` is accepted as an alias."""
    return {
        'name':     data.get('name'),
        'price':    data.get('price'),
        'quantity': data.get('quantity', data.get('qty')),
    }


def _render_form(errors, form_data, product=None):
    if product is None:
        title = 'Add Product'
        form_action = url_for('inventory.create')
    else:
        title = f'Edit — {product.name}'
        form_action = url_for('inventory.update', product_id=product.id)
    return render_template(
        'inventory/form.html',
        title=title,
        form_action=form_action,
        errors=errors,
        form_data=form_data,
        is_edit=product is not None,
        product=product,
    )


# ── LIST / SEARCH ─────────────────────────────────────────────────────────────

@inventory.route('', methods=['GET'])
@login_required
def index():
    """List products newest first; ?q= filters by name."""
    q = request.args.get('q', '').strip()
    products = get_services().products.search(q)

    if wants_json():
        return jsonify([p.to_dict() for p in products])
    return render_template(
        'inventory/index.html',
        title='Products',
        products=products,
        q=q,
    )


# ── CREATE ────────────────────────────────────────────────────────────────────

@inventory.route('/new', methods=['GET'])
@login_required
def new():
    """Show the add-product form."""
    return _render_form(errors={}, form_data={})


@inventory.route('', methods=['POST'])
@login_required
def create():
    """Create a product from a form post or a JSON body."""
    fields = _product_fields(request_data())
    try:
        product = get_services().products.create(**fields)
    except ValidationError as exc:
        if wants_json():
            return json_error(exc)
        return _render_form(errors=exc.errors, form_data=fields)

    current_app.logger.info("User %s created product %s (%s)", g.user_id, product.id, product.name)
    if wants_json():
        return jsonify({'success': True, 'product': product.to_dict()}), 201
    flash(f'Product "{product.name}" added successfully.', 'success')
    return redirect(url_for('inventory.index'))


# ── READ ONE ──────────────────────────────────────────────────────────────────

@inventory.route('/<int:product_id>', methods=['GET'])
@login_required
def detail(product_id):
    try:
        product = get_services().products.get(product_id)
    except NotFound as exc:
        if wants_json():
            return json_error(exc)
        abort(404)

    if wants_json():
        return jsonify(product.to_dict())
    return redirect(url_for('inventory.edit', product_id=product_id))


# ── UPDATE ────────────────────────────────────────────────────────────────────

@inventory.route('/<int:product_id>/edit', methods=['GET'])
@login_required
def edit(product_id):
    """Show the edit form pre-filled with current values."""
    try:
        product = get_services().products.get(product_id)
    except NotFound:
        abort(404)

    form_data = {
        'name':     product.name,
        'price':    product.display_price,
        'quantity': str(product.quantity),
    }
    return _render_form(errors={}, form_data=form_data, product=product)


@inventory.route('/<int:product_id>', methods=['POST', 'PUT'])
@login_required
def update(product_id):
    """Overwrite name / price / quantity of an existing product."""
    products = get_services().products
    fields = _product_fields(request_data())
    try:
        product = products.update(product_id, **fields)
    except NotFound as exc:
        if wants_json():
            return json_error(exc)
        abort(404)
    except ValidationError as exc:
        if wants_json():
            return json_error(exc)
        return _render_form(errors=exc.errors, form_data=fields,
                            product=products.get(product_id))

    current_app.logger.info("User %s updated product %s (%s)", g.user_id, product.id, product.name)
    if wants_json():
        return jsonify({'success': True, 'product': product.to_dict()})
    flash(f'Product "{product.name}" updated successfully.', 'success')
    return redirect(url_for('inventory.index'))


# ── DELETE ────────────────────────────────────────────────────────────────────

@inventory.route('/<int:product_id>/delete', methods=['POST'])
@inventory.route('/<int:product_id>', methods=['DELETE'])
@login_required
def delete(product_id):
    """Delete a product. Deleting a missing id is still a success."""
    get_services().products.delete(product_id)
    current_app.logger.info("User %s deleted product %s", g.user_id, product_id)

    if wants_json() or request.method == 'DELETE':
        return jsonify({'success': True})
    flash('Product deleted.', 'success')
    return redirect(url_for('inventory.index'))
