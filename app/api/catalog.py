"""Продукты и продавцы."""

from fastapi import APIRouter, Depends, HTTPException

from ..db import get_session
from ..schemas import (
    ProductBase,
    ProductCreate,
    ProductRead,
    SellerBase,
    SellerCreate,
    SellerRead,
)
from services import product_service, seller_service

router = APIRouter(tags=["catalog"])


@router.get("/products/", response_model=list[ProductRead])
def read_products(session=Depends(get_session)):
    return list(product_service.get_all_products())


@router.post("/products/", response_model=ProductRead)
def add_product(product_in: ProductCreate, session=Depends(get_session)):
    try:
        return product_service.add_product(product_in.name, product_in.price)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/products/{product_id}", response_model=ProductRead)
def edit_product(product_id: int, product_in: ProductBase, session=Depends(get_session)):
    product = product_service.get_product_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    try:
        return product_service.update_product(product, product_in.name, product_in.price)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/products/{product_id}")
def remove_product(product_id: int, session=Depends(get_session)):
    if not product_service.delete_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return {"status": "deleted"}


@router.get("/sellers/", response_model=list[SellerRead])
def read_sellers(session=Depends(get_session)):
    return list(seller_service.get_all_sellers())


@router.post("/sellers/", response_model=SellerRead)
def add_seller(seller_in: SellerCreate, session=Depends(get_session)):
    try:
        return seller_service.add_seller(seller_in.name, seller_in.commission_rate)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/sellers/{seller_id}", response_model=SellerRead)
def edit_seller(seller_id: int, seller_in: SellerBase, session=Depends(get_session)):
    seller = seller_service.get_seller_by_id(seller_id)
    if not seller:
        raise HTTPException(status_code=404, detail="Seller not found")
    try:
        return seller_service.update_seller(seller, seller_in.name, seller_in.commission_rate)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/sellers/{seller_id}")
def remove_seller(seller_id: int, session=Depends(get_session)):
    if not seller_service.delete_seller(seller_id):
        raise HTTPException(status_code=404, detail="Seller not found")
    return {"status": "deleted"}
