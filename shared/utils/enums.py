from enum import Enum


class UserRole(str, Enum):
    VENDOR = "vendor"
    SUPPLIER = "supplier"
