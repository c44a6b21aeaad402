# Import all models to ensure they are registered with SQLAlchemy
from shared.models.users import Users
from .products import Product
from .orders import Order, OrderItem
from .group_orders import GroupOrder, GroupOrderParticipant
