from flask import Blueprint

inventory = Blueprint('inventory', __name__)

from stockroom.inventory import routes  # noqa: F401, E402
from stockroom.inventory import models  # noqa: F401, E402  — registers Product with SQLAlchemy
