from enum import Enum


class ProductUnit(str, Enum):
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    PIECE = "piece"
    DOZEN = "dozen"
    PACKET = "packet"


class ProductCategory(str, Enum):
    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    SPICES = "spices"
    GRAINS = "grains"
    OILS = "oils"
    DAIRY = "dairy"
    MEAT = "meat"
    BEVERAGES = "beverages"
    PACKAGING = "packaging"
    OTHER = "other"


class AvailabilityStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class ProductSortField(str, Enum):
    CREATED_AT = "created_at"
    PRICE = "price"
    RATING = "rating"
    NAME = "name"
    TOTAL_ORDERS = "total_orders"
