class AppStatusCode:
    """Application level status codes carried in every JsonOutResult."""

    # Success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    CREATED_SUCCESSFULLY = "101"
    UPDATED_SUCCESSFULLY = "102"
    DELETED_SUCCESSFULLY = "103"

    # Validation
    INVALID_INPUT = "200"
    REQUIRED_VALIDATION_ERROR = "201"
    DUPLICATE_ADD_ERROR = "202"

    # Authentication / authorization
    AUTHENTICATION_TOKEN_INVALID = "300"
    AUTHENTICATION_TOKEN_EXPIRED = "301"
    AUTHENTICATION_USER_INVALID = "302"
    AUTHENTICATION_USER_INACTIVE = "303"
    AUTHENTICATION_CREDENTIALS_INVALID = "304"
    UNAUTHORIZED_ACTION = "305"

    # Lookup
    NOT_FOUND = "400"

    # Order lifecycle
    INVALID_STATUS_TRANSITION = "500"
    ORDER_ALREADY_RATED = "501"
    ORDER_NOT_DELIVERED = "502"
    INSUFFICIENT_STOCK = "503"
    CONCURRENT_UPDATE = "504"

    # Generic
    OPERATION_ERROR = "900"
    OPERATION_FAILED = "901"
