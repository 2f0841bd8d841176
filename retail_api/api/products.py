from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from retail_api.api.deps import require_admin
from retail_api.db.mongo import get_db
from retail_api.models.schemas import ProductIn, ProductUpdate, ProductOut, ProductPage, MessageOut
from retail_api.services import catalog_service

router = APIRouter()

@router.get("", response_model=ProductPage)
def list_products(
    search: Optional[str] = None,
    category: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    sort: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db=Depends(get_db),
):
    return catalog_service.list_products(
        db, search=search, category=category,
        min_price=catalog_service.parse_price(min_price, "minPrice"),
        max_price=catalog_service.parse_price(max_price, "maxPrice"),
        sort=sort, page=page, limit=limit,
    )

@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db=Depends(get_db)):
    return catalog_service.get_product(db, product_id)

@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_product(payload: ProductIn, db=Depends(get_db)):
    return catalog_service.create_product(db, payload.model_dump())

@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_admin)])
def update_product(product_id: str, payload: ProductUpdate, db=Depends(get_db)):
    return catalog_service.update_product(db, product_id, payload.present_fields())

@router.delete("/{product_id}", response_model=MessageOut, dependencies=[Depends(require_admin)])
def delete_product(product_id: str, db=Depends(get_db)):
    return catalog_service.delete_product(db, product_id)
