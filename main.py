import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Depends, Header
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from auth import InvalidToken, create_access_token, decode_token
from catalog import Catalog, ReviewStatus
from checkout import cart_checkout_link, product_checkout_link
from config import LOG_LEVEL, PORT
from database import db
from descriptions import default_provider
from pricing import average_rating, cart_total, format_price
from schemas import (
    AppSettings,
    CartItemIn,
    Product,
    ProductIn,
    ProductUpdate,
    ReviewIn,
    SettingsUpdate,
    SignInInput,
    User,
)
from storage import open_store

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("texpress")

app = FastAPI(title="Texpress API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_catalog: Optional[Catalog] = None


async def get_catalog() -> Catalog:
    global _catalog
    if _catalog is None:
        _catalog = Catalog(open_store(db), describer=default_provider())
        _catalog.on_theme_change(lambda dark: logger.info("Theme switched to %s", "dark" if dark else "light"))
    return _catalog


# Utilities

def product_view(product: Product, settings: AppSettings) -> Dict[str, Any]:
    data = product.to_json()
    data["rating"] = average_rating(product.reviews)
    data["displayPrice"] = format_price(product.price, settings.currency)
    return data


def find_product(catalog: Catalog, product_id: str) -> Product:
    product = catalog.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# Auth models
class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Dict[str, Any]


# Dependencies

def get_token_user(authorization: Optional[str] = Header(default=None)) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        return decode_token(token)
    except InvalidToken:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


async def require_admin(user: User = Depends(get_token_user), catalog: Catalog = Depends(get_catalog)) -> User:
    # the token only counts while its holder is still the signed-in user
    current = catalog.user
    if current is None or current.email != user.email:
        raise HTTPException(status_code=401, detail="Session ended, sign in again")
    if not (user.is_admin and current.is_admin):
        raise HTTPException(status_code=403, detail="Admins only")
    return current


# Routes
@app.get("/")
def read_root():
    return {"message": "Texpress Storefront API"}


@app.get("/test")
async def test_storage(catalog: Catalog = Depends(get_catalog)):
    response = {
        "backend": "✅ Running",
        "storage": type(catalog.store).__name__,
        "database": "❌ Not Configured",
        "keys": [],
        "products": len(catalog.products),
        "cart_items": len(catalog.cart),
    }
    try:
        if db is not None:
            response["database"] = "✅ Available"
            response["database_name"] = db.name
        response["keys"] = catalog.store.keys()
    except Exception as e:
        response["database"] = f"❌ Error: {str(e)[:80]}"
    return response


# Auth
@app.post("/auth/signin", response_model=TokenResponse)
async def sign_in(payload: SignInInput, catalog: Catalog = Depends(get_catalog)):
    user = catalog.sign_in(payload.email, payload.password)
    if user is None:
        raise HTTPException(status_code=400, detail="Email and password are required")
    return TokenResponse(access_token=create_access_token(user), user=user.to_json())


@app.post("/auth/signout")
async def sign_out(catalog: Catalog = Depends(get_catalog)):
    catalog.sign_out()
    return {"ok": True}


@app.get("/auth/me")
async def me(catalog: Catalog = Depends(get_catalog)):
    if catalog.user is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return catalog.user.to_json()


# Products
@app.get("/products")
async def list_products(category: Optional[str] = None, catalog: Catalog = Depends(get_catalog)):
    settings = catalog.settings
    return [product_view(p, settings) for p in catalog.list_products(category)]


@app.get("/products/{product_id}")
async def get_product(product_id: str, catalog: Catalog = Depends(get_catalog)):
    return product_view(find_product(catalog, product_id), catalog.settings)


@app.post("/products")
async def create_product(data: ProductIn, admin: User = Depends(require_admin), catalog: Catalog = Depends(get_catalog)):
    product = await catalog.add_product(data)
    return product_view(product, catalog.settings)


@app.patch("/products/{product_id}")
async def update_product(product_id: str, data: ProductUpdate, admin: User = Depends(require_admin),
                   catalog: Catalog = Depends(get_catalog)):
    product = catalog.edit_product(product_id, data)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product_view(product, catalog.settings)


@app.delete("/products/{product_id}")
async def delete_product(product_id: str, admin: User = Depends(require_admin), catalog: Catalog = Depends(get_catalog)):
    if not catalog.delete_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return {"ok": True}


REVIEW_ERRORS = {
    ReviewStatus.NEEDS_SIGN_IN: (401, "Sign in to leave a review"),
    ReviewStatus.EMPTY_COMMENT: (400, "Review comment is empty"),
    ReviewStatus.INVALID_RATING: (400, "Rating must be between 1 and 5"),
    ReviewStatus.UNKNOWN_PRODUCT: (404, "Product not found"),
}


@app.post("/products/{product_id}/reviews")
async def add_review(product_id: str, data: ReviewIn, catalog: Catalog = Depends(get_catalog)):
    status = catalog.add_review(product_id, data.rating, data.comment, catalog.user)
    if status in REVIEW_ERRORS:
        code, detail = REVIEW_ERRORS[status]
        raise HTTPException(status_code=code, detail=detail)
    return product_view(catalog.get_product(product_id), catalog.settings)


@app.get("/products/{product_id}/buy")
async def buy_now(product_id: str, catalog: Catalog = Depends(get_catalog)):
    product = find_product(catalog, product_id)
    return {"url": product_checkout_link(product, catalog.settings.currency)}


# Cart
@app.get("/cart")
async def get_cart(catalog: Catalog = Depends(get_catalog)):
    settings = catalog.settings
    items = catalog.cart_products()
    return {
        "items": [product_view(p, settings) for p in items],
        "count": len(catalog.cart),
        "total": format_price(cart_total(items), settings.currency),
    }


@app.post("/cart")
async def add_to_cart(item: CartItemIn, catalog: Catalog = Depends(get_catalog)):
    catalog.add_to_cart(item.product_id)
    return {"ok": True, "count": len(catalog.cart)}


@app.delete("/cart/{index}")
async def remove_from_cart(index: int, catalog: Catalog = Depends(get_catalog)):
    removed = catalog.remove_from_cart(index)
    return {"ok": True, "removed": removed, "count": len(catalog.cart)}


@app.get("/cart/checkout")
async def checkout_cart(catalog: Catalog = Depends(get_catalog)):
    url = cart_checkout_link(catalog.cart_products(), catalog.settings.currency)
    if url is None:
        raise HTTPException(status_code=400, detail="Cart is empty")
    return {"url": url}


# Settings
@app.get("/settings")
async def get_settings(catalog: Catalog = Depends(get_catalog)):
    return catalog.settings.to_json()


@app.patch("/settings")
async def update_settings(data: SettingsUpdate, catalog: Catalog = Depends(get_catalog)):
    return catalog.update_settings(data).to_json()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
