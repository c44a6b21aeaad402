import logging
from sqlalchemy import Float, cast, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.helpers.id_helper import parse_uuid
from shared.models.users import Users
from shared.utils.exceptions import InternalError, NotFoundError, ValidationError
from ..models.products import Product

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating) -> int:
    if rating is None or isinstance(rating, bool) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError("Rating must be between 1 and 5")
    return int(rating)


def running_mean_values(model, rating: int) -> dict:
    """SET clause for sum += r, count += 1, mean = new sum / new count.

    Every expression reads the pre-update row, so the three columns move
    together in one statement.
    """
    return {
        "rating_sum": model.rating_sum + rating,
        "total_ratings": model.total_ratings + 1,
        "rating": cast(model.rating_sum + rating, Float) / (model.total_ratings + 1),
    }


def apply_user_rating(db: Session, user_id, rating: int):
    """Fold one rating into an account's aggregate. Caller owns the commit."""
    rating = validate_rating(rating)
    result = db.execute(
        update(Users)
        .where(Users.id == user_id)
        .values(**running_mean_values(Users, rating))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise NotFoundError("Supplier not found")


def apply_product_rating(db: Session, product_id, rating: int):
    rating = validate_rating(rating)
    result = db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(**running_mean_values(Product, rating))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise NotFoundError("Product not found")


def update_product_rating(db: Session, product_id: str, rating: int) -> Product:
    """Standalone product rating; order rating does not call this."""
    pid = parse_uuid(product_id)
    if not pid:
        raise NotFoundError("Product not found")

    try:
        apply_product_rating(db, pid, rating)
        db.commit()
    except (ValidationError, NotFoundError):
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Rating update failed for product %s", product_id)
        raise InternalError("Server error during product rating")

    product = db.query(Product).filter(Product.id == pid).one()
    logger.info("Product %s rated %s, mean now %.2f over %s ratings",
                pid, rating, product.rating, product.total_ratings)
    return product
