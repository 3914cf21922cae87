"""
Storefront Schemas

Pydantic models for the four persisted values (settings, products, cart,
user) and the payloads that change them. JSON field names match the stored
layout (camelCase); Python attributes are snake_case.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Language(str, Enum):
    ENGLISH = "en"
    ARABIC = "ar"
    FRENCH = "fr"


class Currency(str, Enum):
    USD = "USD"
    CAD = "CAD"


class StoredModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Review(StoredModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    user_id: str = Field(..., alias="userId", description="Author email")
    user_name: str = Field(..., alias="userName", description="Local part of the author email")
    rating: int = Field(..., ge=1, le=5)
    comment: str
    date: str


class ProductAttribute(StoredModel):
    key: str
    value: str


class Product(StoredModel):
    id: str
    name: str
    price: float = Field(..., ge=0, description="Price in USD")
    weight: float = Field(0, ge=0, description="Weight in kg")
    description: str = ""
    images: List[str] = Field(default_factory=list)
    attributes: List[ProductAttribute] = Field(default_factory=list)
    reviews: List[Review] = Field(default_factory=list, description="Newest first")
    category: str = "General"


class User(StoredModel):
    email: str
    is_admin: bool = Field(False, alias="isAdmin")


class AppSettings(StoredModel):
    language: Language = Language.ENGLISH
    currency: Currency = Currency.USD
    is_dark_mode: bool = Field(False, alias="isDarkMode")


# Payloads

class ProductIn(StoredModel):
    name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    images: Optional[List[str]] = None
    attributes: Optional[List[ProductAttribute]] = None


class ProductUpdate(StoredModel):
    name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    images: Optional[List[str]] = None
    attributes: Optional[List[ProductAttribute]] = None
    category: Optional[str] = None


class SettingsUpdate(StoredModel):
    language: Optional[Language] = None
    currency: Optional[Currency] = None
    is_dark_mode: Optional[bool] = Field(None, alias="isDarkMode")


class ReviewIn(BaseModel):
    rating: int = 5
    comment: str = ""


class SignInInput(BaseModel):
    email: str = ""
    password: str = ""


class CartItemIn(BaseModel):
    product_id: str
