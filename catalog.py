"""
Catalog controller.

`Catalog` owns the whole storefront state (products, cart, signed-in user,
settings) and is the only thing that changes it. Every mutation updates the
in-memory `AppState` first and then saves the one persisted value it
touched. Rejected operations leave state untouched and do not raise.
"""
import logging
import time
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from auth import PasscodeAuthenticator
from config import PLACEHOLDER_IMAGE
from descriptions import FALLBACK_DESCRIPTION, StaticDescriptionProvider
from schemas import (
    AppSettings,
    Product,
    ProductIn,
    ProductUpdate,
    Review,
    SettingsUpdate,
    User,
)
from seed import INITIAL_PRODUCTS
from storage import CART_KEY, PRODUCTS_KEY, SETTINGS_KEY, USER_KEY

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"
DEFAULT_PRODUCT_NAME = "New Product"
MIN_RATING = 1
MAX_RATING = 5

_products_adapter = TypeAdapter(List[Product])
_cart_adapter = TypeAdapter(List[str])


class ReviewStatus(str, Enum):
    ADDED = "added"
    NEEDS_SIGN_IN = "needs_sign_in"
    EMPTY_COMMENT = "empty_comment"
    INVALID_RATING = "invalid_rating"
    UNKNOWN_PRODUCT = "unknown_product"


class AppState(BaseModel):
    products: List[Product] = Field(default_factory=list)
    cart: List[str] = Field(default_factory=list)
    user: Optional[User] = None
    settings: AppSettings = Field(default_factory=AppSettings)


class ViewState(BaseModel):
    """Presentation flags the catalog flips as a side effect."""
    admin_open: bool = False
    sign_in_open: bool = False


def locale_date(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


class Catalog:
    def __init__(self, store, describer=None, authenticator=None, clock: Callable[[], datetime] = datetime.now,
                 placeholder_image: str = PLACEHOLDER_IMAGE):
        self.store = store
        self.describer = describer or StaticDescriptionProvider()
        self.authenticator = authenticator or PasscodeAuthenticator()
        self.clock = clock
        self.placeholder_image = placeholder_image
        self.view = ViewState()
        self._theme_listeners: List[Callable[[bool], None]] = []
        self._last_id = 0
        self.state = self._load_state()

    # Loading / saving

    def _load(self, key, default, validate):
        raw = self.store.load(key, None)
        if raw is None:
            return default()
        try:
            return validate(raw)
        except ValidationError as e:
            logger.warning("Stored %s is malformed, using defaults: %s", key, e.error_count())
            return default()

    def _load_state(self) -> AppState:
        return AppState(
            settings=self._load(SETTINGS_KEY, AppSettings, AppSettings.model_validate),
            products=self._load(PRODUCTS_KEY, lambda: _products_adapter.validate_python(INITIAL_PRODUCTS),
                                _products_adapter.validate_python),
            cart=self._load(CART_KEY, list, _cart_adapter.validate_python),
            user=self._load(USER_KEY, lambda: None, User.model_validate),
        )

    def _save_products(self):
        self.store.save(PRODUCTS_KEY, [p.to_json() for p in self.state.products])

    def _save_cart(self):
        self.store.save(CART_KEY, list(self.state.cart))

    def _save_user(self):
        self.store.save(USER_KEY, self.state.user.to_json() if self.state.user else None)

    def _save_settings(self):
        self.store.save(SETTINGS_KEY, self.state.settings.to_json())

    def _new_id(self) -> str:
        # millisecond timestamps, bumped so two ids minted in the same ms differ
        candidate = max(int(time.time() * 1000), self._last_id + 1)
        taken = {p.id for p in self.state.products}
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    # Lookups

    @property
    def products(self) -> List[Product]:
        return self.state.products

    @property
    def cart(self) -> List[str]:
        return self.state.cart

    @property
    def user(self) -> Optional[User]:
        return self.state.user

    @property
    def settings(self) -> AppSettings:
        return self.state.settings

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self.state.products:
            if product.id == product_id:
                return product
        return None

    def list_products(self, category: Optional[str] = None) -> List[Product]:
        if category:
            return [p for p in self.state.products if p.category == category]
        return list(self.state.products)

    def cart_products(self) -> List[Product]:
        """Cart line items in order; ids of deleted products are skipped."""
        by_id = {p.id: p for p in self.state.products}
        return [by_id[pid] for pid in self.state.cart if pid in by_id]

    # Session

    def sign_in(self, email: str, password: str) -> Optional[User]:
        user = self.authenticator.authenticate(email, password)
        if user is None:
            return None
        self.state.user = user
        self.view.sign_in_open = False
        self._save_user()
        return user

    def sign_out(self) -> None:
        self.state.user = None
        self.view.admin_open = False
        self._save_user()

    # Cart

    def add_to_cart(self, product_id: str) -> None:
        self.state.cart.append(product_id)
        self._save_cart()

    def remove_from_cart(self, index: int) -> bool:
        if index < 0 or index >= len(self.state.cart):
            return False
        del self.state.cart[index]
        self._save_cart()
        return True

    # Reviews

    def add_review(self, product_id: str, rating: int, comment: str, author: Optional[User]) -> ReviewStatus:
        if author is None:
            self.view.sign_in_open = True
            return ReviewStatus.NEEDS_SIGN_IN
        if not comment or not comment.strip():
            return ReviewStatus.EMPTY_COMMENT
        if not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            return ReviewStatus.INVALID_RATING

        index = self._index_of(product_id)
        if index is None:
            return ReviewStatus.UNKNOWN_PRODUCT

        review = Review(
            id=self._new_id(),
            user_id=author.email,
            user_name=author.email.split("@")[0],
            rating=rating,
            comment=comment,
            date=locale_date(self.clock()),
        )
        product = self.state.products[index]
        self.state.products[index] = product.model_copy(update={"reviews": [review] + product.reviews})
        self._save_products()
        return ReviewStatus.ADDED

    # Admin

    async def add_product(self, partial: Union[ProductIn, dict, None] = None) -> Product:
        data = _coerce(ProductIn, partial)
        name = data.name or DEFAULT_PRODUCT_NAME
        price = data.price or 0
        weight = data.weight or 0

        description = data.description
        if not description:
            description = await self._describe(data.name or "", price, weight)

        product = Product(
            id=self._new_id(),
            name=name,
            price=price,
            weight=weight,
            description=description,
            images=data.images or [self.placeholder_image],
            attributes=data.attributes or [],
            reviews=[],
            category=DEFAULT_CATEGORY,
        )
        self.state.products.append(product)
        self._save_products()
        logger.info("Added product %s (%s)", product.id, product.name)
        return product

    async def _describe(self, name: str, price: float, weight: float) -> str:
        try:
            return await self.describer.describe(name, price, weight)
        except Exception as e:
            logger.error("Description provider raised for %r: %s", name, e)
            return FALLBACK_DESCRIPTION

    def edit_product(self, product_id: str, partial: Union[ProductUpdate, dict]) -> Optional[Product]:
        index = self._index_of(product_id)
        if index is None:
            return None
        changes = _changes(_coerce(ProductUpdate, partial))
        # a product always keeps at least one image
        if changes.get("images") == []:
            del changes["images"]
        if not changes:
            return self.state.products[index]
        merged = {**self.state.products[index].to_json(), **changes}
        product = Product.model_validate(merged)
        self.state.products[index] = product
        self._save_products()
        return product

    def delete_product(self, product_id: str) -> bool:
        index = self._index_of(product_id)
        if index is not None:
            del self.state.products[index]
            self._save_products()
            logger.info("Deleted product %s", product_id)
        if product_id in self.state.cart:
            self.state.cart = [pid for pid in self.state.cart if pid != product_id]
            self._save_cart()
        return index is not None

    # Settings

    def on_theme_change(self, listener: Callable[[bool], None]) -> None:
        self._theme_listeners.append(listener)

    def update_settings(self, partial: Union[SettingsUpdate, dict]) -> AppSettings:
        changes = _changes(_coerce(SettingsUpdate, partial))
        was_dark = self.state.settings.is_dark_mode
        self.state.settings = AppSettings.model_validate({**self.state.settings.to_json(), **changes})
        self._save_settings()
        if self.state.settings.is_dark_mode != was_dark:
            for listener in self._theme_listeners:
                listener(self.state.settings.is_dark_mode)
        return self.state.settings

    # View

    def open_admin(self) -> bool:
        self.view.admin_open = bool(self.state.user and self.state.user.is_admin)
        return self.view.admin_open

    def _index_of(self, product_id: str) -> Optional[int]:
        for i, product in enumerate(self.state.products):
            if product.id == product_id:
                return i
        return None


def _coerce(model, partial):
    if partial is None:
        return model()
    if isinstance(partial, model):
        return partial
    if isinstance(partial, BaseModel):
        partial = partial.model_dump(exclude_unset=True, by_alias=True)
    return model.model_validate(partial)


def _changes(partial: BaseModel) -> dict:
    data = partial.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return {k: v for k, v in data.items() if v is not None}
