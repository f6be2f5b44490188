"""CatalogClient: httpx implementation of CatalogClientProtocol.

verify():          GET {base}/{productId}?variantId=..
decrement_stock(): PUT {base}/reduce-stock/{productId}?variantId=..&merchantId=..&quantity=..

verify() never raises for remote trouble: transport failures, 5xx and empty
bodies are retried, and anything still failing (plus 4xx, success=false, no
matching seller, missing price/stock, malformed JSON) comes back as None.
decrement_stock() raises RemoteServiceError once its attempts are spent; the
caller decides whether that matters.
"""

import asyncio
import logging

import httpx
from pydantic import ValidationError

from config.settings import settings
from src.mp_catalog.domain.models import ProductSnapshot
from src.mp_catalog.infrastructure.schemas import CatalogProductResponse
from src.mp_common.errors import RemoteServiceError
from src.mp_common.money import to_money
from src.mp_common.retry import RetryPolicy, Sleep, retrying

logger = logging.getLogger(__name__)


class TransientCatalogError(RemoteServiceError):
    """5xx or empty body: worth another attempt."""


def default_verify_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.CATALOG_VERIFY_MAX_ATTEMPTS,
        backoff_initial=settings.CATALOG_VERIFY_BACKOFF_SECONDS,
        backoff_factor=settings.CATALOG_VERIFY_BACKOFF_FACTOR,
        pre_attempt_delay=settings.CATALOG_REQUEST_DELAY_SECONDS,
    )


def default_decrement_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.CATALOG_DECREMENT_MAX_ATTEMPTS,
        backoff_initial=settings.CATALOG_DECREMENT_DELAY_SECONDS,
        backoff_factor=1.0,
    )


class CatalogClient:
    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
        verify_policy: RetryPolicy | None = None,
        decrement_policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_client or httpx.AsyncClient(
            timeout=settings.CATALOG_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
        )
        self._verify_policy = verify_policy or default_verify_policy()
        self._decrement_policy = decrement_policy or default_decrement_policy()
        self._sleep = sleep

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # verify
    # ------------------------------------------------------------------

    async def verify(
        self, product_id: int, variant_id: str, merchant_id: str
    ) -> ProductSnapshot | None:
        url = f"{self._base_url}/{product_id}"
        logger.info("Catalog verify: %s variantId=%s merchantId=%s", url, variant_id, merchant_id)

        async def _fetch() -> bytes | None:
            resp = await self._http.get(url, params={"variantId": variant_id})
            if resp.status_code >= 500:
                raise TransientCatalogError(f"HTTP {resp.status_code} from {url}")
            if resp.is_error:
                logger.warning("Catalog verify %s returned HTTP %d", url, resp.status_code)
                return None
            if not resp.content.strip():
                raise TransientCatalogError(f"empty body from {url}")
            return resp.content

        try:
            body = await retrying(
                self._verify_policy,
                (httpx.TransportError, TransientCatalogError),
                sleep=self._sleep,
                label=f"catalog verify {product_id}",
            )(_fetch)
        except (httpx.TransportError, TransientCatalogError) as exc:
            logger.warning("Catalog verify %s gave up: %s", url, exc)
            return None
        if body is None:
            return None

        try:
            payload = CatalogProductResponse.model_validate_json(body)
        except ValidationError as exc:
            logger.warning("Malformed catalog payload for product %s: %s", product_id, exc)
            return None

        if not payload.success or payload.data is None:
            return None

        try:
            offer = payload.data.find_offer(merchant_id)
        except ValidationError as exc:
            logger.warning(
                "Malformed offer for product %s / merchant %s: %s", product_id, merchant_id, exc
            )
            return None
        if offer is None:
            logger.warning("Merchant %s does not sell product %s", merchant_id, product_id)
            return None
        if offer.price is None or offer.stock is None:
            logger.warning(
                "Offer for product %s / merchant %s lacks price or stock", product_id, merchant_id
            )
            return None

        return ProductSnapshot(
            name=payload.data.name or str(product_id),
            price=to_money(offer.price),
            stock=offer.stock,
            merchant_name=offer.merchant_name or "",
            image_url=payload.data.first_image_url,
        )

    # ------------------------------------------------------------------
    # decrement_stock
    # ------------------------------------------------------------------

    async def decrement_stock(
        self, product_id: int, variant_id: str, merchant_id: str, quantity: int
    ) -> None:
        url = f"{self._base_url}/reduce-stock/{product_id}"
        params: dict[str, str | int] = {
            "variantId": variant_id,
            "merchantId": merchant_id,
            "quantity": quantity,
        }

        async def _put() -> None:
            resp = await self._http.put(url, params=params)
            resp.raise_for_status()

        try:
            await retrying(
                self._decrement_policy,
                (httpx.HTTPError,),
                sleep=self._sleep,
                label=f"catalog reduce-stock {product_id}",
            )(_put)
        except httpx.HTTPError as exc:
            raise RemoteServiceError(
                f"reduce-stock failed for product {product_id} variant {variant_id}: {exc}"
            ) from exc
        logger.info(
            "Inventory reduced: product=%s variant=%s merchant=%s qty=%d",
            product_id, variant_id, merchant_id, quantity,
        )


_catalog_client: CatalogClient | None = None


def get_catalog_client() -> CatalogClient:
    """Get or create the process-wide CatalogClient."""
    global _catalog_client  # noqa: PLW0603
    if _catalog_client is None:
        _catalog_client = CatalogClient(settings.CATALOG_BASE_URL)
    return _catalog_client


async def close_catalog_client() -> None:
    """Close the shared client's connection pool."""
    global _catalog_client  # noqa: PLW0603
    if _catalog_client is not None:
        await _catalog_client.aclose()
        _catalog_client = None
