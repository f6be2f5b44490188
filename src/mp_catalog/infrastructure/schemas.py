"""Typed view of the product service's GET /{productId} payload.

Every field is optional so that a partially populated record still parses;
whether it is usable is decided by the client, which turns any gap into a
single NotFound outcome. Sellers and image URLs are kept raw and checked
entry by entry, so one merchant's bad offer cannot hide another's.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SellerOffer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    merchant_id: str | None = Field(default=None, alias="merchantId")
    merchant_name: str | None = Field(default=None, alias="merchantName")
    price: Decimal | None = None
    stock: int | None = None


class CatalogProduct(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    image_urls: list[Any] | None = Field(default=None, alias="imageUrls")
    sellers: list[Any] | None = None

    def find_offer(self, merchant_id: str) -> SellerOffer | None:
        """First seller whose merchantId matches, ignoring case.

        Only that entry is validated; raises pydantic.ValidationError when
        it is malformed.
        """
        wanted = merchant_id.casefold()
        for entry in self.sellers or []:
            if not isinstance(entry, dict):
                continue
            candidate = entry.get("merchantId")
            if isinstance(candidate, str) and candidate.casefold() == wanted:
                return SellerOffer.model_validate(entry)
        return None

    @property
    def first_image_url(self) -> str:
        for url in self.image_urls or []:
            if isinstance(url, str) and url.strip():
                return url
        return ""


class CatalogProductResponse(BaseModel):
    success: bool = False
    data: CatalogProduct | None = None
