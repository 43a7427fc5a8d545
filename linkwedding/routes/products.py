from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from linkwedding.database import get_session
from linkwedding.models.product import Product

router = APIRouter()


def product_to_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "jenis": product.jenis,
        "design": product.design,
        "packages": product.packages or [],
        "image_url": product.image_url,
        "demo_url": product.demo_url,
        "created_at": product.created_at,
    }


@router.get("")
def list_products(
    category: str | None = None,
    session: Session = Depends(get_session),
):
    query = select(Product).order_by(Product.created_at.desc())
    if category:
        query = query.where(Product.category == category)

    return [product_to_dict(p) for p in session.exec(query).all()]


@router.get("/{product_id}")
def get_product(product_id: int, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    return product_to_dict(product)
