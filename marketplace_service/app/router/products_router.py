from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.core.auth import allow_supplier, allow_vendor
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ..crud import products_crud as crud
from ..schemas.products_schemas import (CategoryListResponse, ProductCreate, ProductListRequest, ProductListResponse,
                                        ProductOut, ProductResponse, ProductUpdate, RecommendationResponse)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("/categories", response_model=JsonOutResult[CategoryListResponse])
def get_categories():
    return success_response(
        data=CategoryListResponse(categories=crud.get_categories()))


@router.get("", response_model=JsonOutResult[ProductListResponse])
def get_products(
    params: ProductListRequest = Depends(),
    db: Session = Depends(get_db)
):
    return success_response(data=crud.get_products(db, params))


@router.get("/recommendations", response_model=JsonOutResult[RecommendationResponse])
def get_recommendations(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_vendor)
):
    return success_response(
        data=RecommendationResponse(
            recommended=crud.get_recommendations(db, current_user)))


@router.get("/supplier/{supplier_id}", response_model=JsonOutResult[ProductListResponse])
def get_supplier_products(
    supplier_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: Session = Depends(get_db)
):
    return success_response(
        data=crud.get_supplier_products(db, supplier_id, page, limit))


@router.get("/{product_id}", response_model=JsonOutResult[ProductResponse])
def get_product(
    product_id: str,
    db: Session = Depends(get_db)
):
    product = crud.get_product(db, product_id)
    return success_response(
        data=ProductResponse(product=ProductOut.model_validate(product)))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JsonOutResult[ProductResponse])
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_supplier)
):
    created = crud.create_product(db, product, current_user)
    return success_response(
        data=ProductResponse(product=ProductOut.model_validate(created)),
        message="Product created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/{product_id}", response_model=JsonOutResult[ProductResponse])
def update_product(
    product_id: str,
    product: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_supplier)
):
    updated = crud.update_product(db, product_id, product, current_user)
    return success_response(
        data=ProductResponse(product=ProductOut.model_validate(updated)),
        message="Product updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


# ---------------- Delete (Soft Delete) ----------------
@router.delete("/{product_id}", response_model=JsonOutResult[ProductResponse])
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_supplier)
):
    deleted = crud.delete_product(db, product_id, current_user)
    return success_response(
        data=ProductResponse(product=ProductOut.model_validate(deleted)),
        message="Product deleted successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )
