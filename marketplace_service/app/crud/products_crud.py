import logging
from collections import Counter
from typing import List
from sqlalchemy import asc, desc, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken, build_pagination, page_offset
from shared.helpers.id_helper import parse_uuid
from shared.models.users import Users
from shared.utils.exceptions import AuthorizationError, InternalError, NotFoundError, ValidationError
from ..enum.product_enum import ProductCategory, ProductSortField
from ..models.orders import Order, OrderItem
from ..models.products import Product
from ..schemas.products_schemas import CategoryOut, ProductCreate, ProductListRequest, ProductOut, ProductUpdate

logger = logging.getLogger(__name__)

RECENT_ORDERS_FOR_RECOMMENDATION = 5
TOP_CATEGORIES = 2
PRODUCTS_PER_CATEGORY = 3
FALLBACK_RECOMMENDATIONS = 6

SORT_COLUMNS = {
    ProductSortField.CREATED_AT: Product.created_at,
    ProductSortField.PRICE: Product.price,
    ProductSortField.RATING: Product.rating,
    ProductSortField.NAME: Product.name,
    ProductSortField.TOTAL_ORDERS: Product.total_orders,
}


def _to_out(products) -> List[ProductOut]:
    return [ProductOut.model_validate(p) for p in products]


def get_categories() -> List[CategoryOut]:
    return [CategoryOut(value=c, label=c.value.capitalize()) for c in ProductCategory]


def build_product_filters(params: ProductListRequest):
    filters = [Product.is_active == True]

    if params.category and params.category.lower() != "all":
        filters.append(Product.category == params.category.lower())

    if params.search:
        search_term = f"%{params.search.lower()}%"
        filters.append(
            or_(
                func.lower(Product.name).like(search_term),
                func.lower(Product.description).like(search_term),
                func.lower(Product.supplier_name).like(search_term),
            )
        )

    if params.min_price is not None:
        filters.append(Product.price >= params.min_price)
    if params.max_price is not None:
        filters.append(Product.price <= params.max_price)

    return filters


def get_products(db: Session, params: ProductListRequest):
    filters = build_product_filters(params)
    total = db.query(func.count(Product.id)).filter(*filters).scalar()

    column = SORT_COLUMNS[params.sort_by]
    order = asc(column) if params.sort_order == "asc" else desc(column)

    products = (
        db.query(Product)
        .filter(*filters)
        .order_by(order, Product.id)
        .offset(page_offset(params.page, params.limit))
        .limit(params.limit)
        .all()
    )

    return {
        "products": _to_out(products),
        "pagination": build_pagination(params.page, params.limit, total),
    }


def get_product(db: Session, product_id: str) -> Product:
    pid = parse_uuid(product_id)
    product = db.query(Product).filter(
        Product.id == pid).first() if pid else None

    if not product or not product.is_active:
        raise NotFoundError("Product not found")
    return product


def get_supplier_products(db: Session, supplier_id: str, page: int = 1, limit: int = 12):
    sid = parse_uuid(supplier_id)
    if not sid:
        raise NotFoundError("Supplier not found")

    filters = [Product.supplier_id == sid, Product.is_active == True]
    total = db.query(func.count(Product.id)).filter(*filters).scalar()
    products = (
        db.query(Product)
        .filter(*filters)
        .order_by(desc(Product.created_at), Product.id)
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )

    return {
        "products": _to_out(products),
        "pagination": build_pagination(page, limit, total),
    }


def get_recommendations(db: Session, current_user: UserToken) -> List[ProductOut]:
    recent_orders = (
        db.query(Order.id)
        .filter(Order.vendor_id == parse_uuid(current_user.user_id))
        .order_by(desc(Order.created_at))
        .limit(RECENT_ORDERS_FOR_RECOMMENDATION)
        .subquery()
    )

    # categories are looked up live; the item snapshot does not carry them
    categories = (
        db.query(Product.category)
        .join(OrderItem, OrderItem.product_id == Product.id)
        .filter(OrderItem.order_id.in_(select(recent_orders.c.id)))
        .all()
    )
    counts = Counter(c for (c,) in categories)

    recommended = []
    for category, _ in counts.most_common(TOP_CATEGORIES):
        recommended.extend(
            db.query(Product)
            .filter(Product.category == category, Product.is_active == True)
            .order_by(desc(Product.rating), Product.id)
            .limit(PRODUCTS_PER_CATEGORY)
            .all()
        )

    if not recommended:
        recommended = (
            db.query(Product)
            .filter(Product.is_active == True)
            .order_by(desc(Product.rating), Product.id)
            .limit(FALLBACK_RECOMMENDATIONS)
            .all()
        )

    return _to_out(recommended)


def validate_product_values(values: dict):
    price = values.get("price")
    if price is not None and price <= 0:
        raise ValidationError("Price must be greater than 0")

    stock = values.get("stock")
    if stock is not None and stock < 0:
        raise ValidationError("Stock cannot be negative")

    min_qty = values.get("min_order_quantity")
    if min_qty is not None and min_qty < 1:
        raise ValidationError("Minimum order quantity must be at least 1")

    name = values.get("name")
    if name and len(name) > 200:
        raise ValidationError("Product name cannot exceed 200 characters")

    description = values.get("description")
    if description and len(description) > 1000:
        raise ValidationError("Description cannot exceed 1000 characters")


def create_product(db: Session, data: ProductCreate, current_user: UserToken) -> Product:
    if not data.name or data.price is None or not data.unit or data.stock is None or not data.category:
        raise ValidationError(
            "Name, price, unit, stock, and category are required")

    values = data.model_dump()
    if values["min_order_quantity"] is None:
        values["min_order_quantity"] = 1
    validate_product_values(values)

    supplier = db.query(Users).filter(
        Users.id == parse_uuid(current_user.user_id)).first()

    product = Product(
        name=data.name,
        description=data.description,
        price=data.price,
        unit=data.unit,
        stock=data.stock,
        category=data.category,
        image_url=data.image_url,
        min_order_quantity=values["min_order_quantity"],
        supplier_id=supplier.id,
        supplier_name=supplier.name,
    )

    try:
        db.add(product)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Product creation failed for supplier %s",
                         current_user.user_id)
        raise InternalError("Server error during product creation")

    db.refresh(product)
    logger.info("Supplier %s listed product %s (%s)",
                current_user.user_id, product.id, product.name)
    return product


def _get_owned_product(db: Session, product_id: str, current_user: UserToken, action: str) -> Product:
    pid = parse_uuid(product_id)
    product = db.query(Product).filter(
        Product.id == pid).first() if pid else None
    if not product:
        raise NotFoundError("Product not found")

    if str(product.supplier_id) != current_user.user_id:
        logger.warning("User %s tried to %s product %s owned by %s",
                       current_user.user_id, action, product.id, product.supplier_id)
        raise AuthorizationError(f"Not authorized to {action} this product")
    return product


def update_product(db: Session, product_id: str, data: ProductUpdate, current_user: UserToken) -> Product:
    product = _get_owned_product(db, product_id, current_user, "update")

    values = data.model_dump(exclude_unset=True)
    for required in ("name", "price", "unit", "stock", "category", "min_order_quantity"):
        if required in values and values[required] is None:
            raise ValidationError(
                f"{required.replace('_', ' ').capitalize()} cannot be empty")
    validate_product_values(values)

    for key, value in values.items():
        setattr(product, key, value)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Product update failed for %s", product_id)
        raise InternalError("Server error during product update")

    db.refresh(product)
    logger.info("Product %s updated by %s", product.id, current_user.user_id)
    return product


def delete_product(db: Session, product_id: str, current_user: UserToken) -> Product:
    product = _get_owned_product(db, product_id, current_user, "delete")

    # soft delete; past orders keep their item snapshots
    product.is_active = False
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Product deletion failed for %s", product_id)
        raise InternalError("Server error during product deletion")

    db.refresh(product)
    logger.info("Product %s deactivated by %s",
                product.id, current_user.user_id)
    return product
