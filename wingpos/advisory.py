"""Advisory AI client backed by the Gemini ``generateContent`` REST API.

Every public coroutine degrades to a fallback value when the service is not
configured, unreachable or returns something unusable. Core state is never
read back from here; callers only display what comes out.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

import httpx

from wingpos.config import (
    CURRENCY,
    GEMINI_API_BASE,
    GEMINI_API_KEY_ENV,
    GEMINI_IMAGE_MODEL,
    GEMINI_TEXT_MODEL,
    GEMINI_TIMEOUT_SECONDS,
    RESTAURANT_NAME,
)
from wingpos.errors import AdvisoryServiceError
from wingpos.models import InventoryItem, MenuItem, OrderItem, Sale, Table
from wingpos.sales import SalesReport, local_day

logger = logging.getLogger(__name__)

MAX_UPSELL_SUGGESTIONS = 3

SUMMARY_FALLBACK = "The sales summary could not be generated. Please try again."
ANSWER_FALLBACK = "Sorry, I had trouble answering that. Please try again."
NOT_IN_CONTEXT = "I don't have that information, but I can ask the chef!"


def description_fallback(dish_name: str) -> str:
    return f"A classic version of {dish_name}."


@dataclass(frozen=True)
class AdvisoryContext:
    """Read-only snapshot of the restaurant handed to the assistant."""

    menu: Sequence[MenuItem] = field(default_factory=tuple)
    tables: Sequence[Table] = field(default_factory=tuple)
    inventory: Sequence[InventoryItem] = field(default_factory=tuple)
    sales: Sequence[Sale] = field(default_factory=tuple)


class AdvisoryClient:
    """Async Gemini client. Pass ``client`` to reuse (or mock) an ``httpx.AsyncClient``."""

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        base_url: str = GEMINI_API_BASE,
        text_model: str = GEMINI_TEXT_MODEL,
        image_model: str = GEMINI_IMAGE_MODEL,
        timeout: float = GEMINI_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key if api_key is not None else os.environ.get(GEMINI_API_KEY_ENV, "")
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._text_model = text_model
        self._image_model = image_model
        self._timeout = timeout

        if not self._api_key:
            logger.warning("Advisory service not configured. Set %s to enable it.", GEMINI_API_KEY_ENV)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Public calls
    # ------------------------------------------------------------------

    async def generate_description(self, dish_name: str) -> str:
        prompt = (
            f'Create a short, delicious-sounding and appealing menu description for a dish called "{dish_name}". '
            "The description should be no more than 25 words. Be creative, enticing, and use culinary terms."
        )
        try:
            return _response_text(await self._generate(self._text_model, _text_body(prompt)))
        except AdvisoryServiceError as exc:
            logger.warning("generate_description failed: %s", exc)
            return description_fallback(dish_name)

    async def generate_image(self, dish_name: str, description: str) -> str:
        """Return a ``data:`` URI for a generated dish photo, or "" on failure."""
        prompt = (
            f"A professional, appetizing, vibrant, high-resolution photo of a restaurant dish called '{dish_name}'. "
            f"Description: '{description}'. The food is beautifully presented on a clean plate with a slightly "
            "blurred, colorful restaurant background. Bright lighting. Style: commercial food photography."
        )
        body = _text_body(prompt)
        body["generationConfig"] = {"responseModalities": ["IMAGE"]}
        try:
            data = await self._generate(self._image_model, body)
            for part in _response_parts(data):
                inline = part.get("inlineData")
                if inline and inline.get("data"):
                    mime = inline.get("mimeType", "image/png")
                    return f"data:{mime};base64,{inline['data']}"
            raise AdvisoryServiceError("No image data found in response")
        except AdvisoryServiceError as exc:
            logger.warning("generate_image failed: %s", exc)
            return ""

    async def suggest_upsell(self, current_items: Sequence[OrderItem], menu: Sequence[MenuItem]) -> list[str]:
        """Up to three menu item names that complement the order and are not already in it."""
        if not current_items:
            return []
        ordered = {line.name for line in current_items}
        available = [item for item in menu if item.name not in ordered]
        if not available:
            return []

        order_lines = "\n".join(f"- {line.quantity}x {line.name}" for line in current_items)
        menu_lines = "\n".join(f"- {item.name} ({item.category})" for item in available)
        prompt = (
            f"Based on the current order, suggest {MAX_UPSELL_SUGGESTIONS} items from the menu that would be a "
            "great addition. Consider complementary items like drinks with food, or desserts. "
            "Do not suggest items that are already in the order.\n\n"
            f"Current order:\n{order_lines}\n\nFull menu (name and category):\n{menu_lines}\n\n"
            "Return ONLY a JSON array of the exact names of the suggested items."
        )
        body = _text_body(prompt)
        body["generationConfig"] = {
            "responseMimeType": "application/json",
            "responseSchema": {"type": "ARRAY", "items": {"type": "STRING"}},
        }
        try:
            raw = _response_text(await self._generate(self._text_model, body))
            try:
                suggestions = json.loads(raw)
            except ValueError as exc:
                raise AdvisoryServiceError(f"Upsell response is not JSON: {raw!r}") from exc
            if not isinstance(suggestions, list) or not all(isinstance(name, str) for name in suggestions):
                raise AdvisoryServiceError(f"Upsell response is not a list of names: {raw!r}")
        except AdvisoryServiceError as exc:
            logger.warning("suggest_upsell failed: %s", exc)
            return []

        known = {item.name for item in available}
        picked: list[str] = []
        for name in suggestions:
            if name in known and name not in picked:
                picked.append(name)
        return picked[:MAX_UPSELL_SUGGESTIONS]

    async def summarize_sales(self, report: SalesReport) -> str:
        top = ", ".join(f"{name} ({count} sold)" for name, count in report.top_selling_items[:3]) or "none"
        by_method = ", ".join(f"{method}: {amount:.0f}" for method, amount in report.revenue_by_payment_method.items())
        prompt = (
            f'You are a business analyst for a restaurant named "{RESTAURANT_NAME}". '
            "Analyze the following sales data and write a concise, insightful summary for the owner in at most "
            "100 words. Highlight key trends and top items, and suggest one opportunity for improvement.\n\n"
            f"Period: {report.period}\n"
            f"- Total revenue: {report.total_revenue:.0f} {CURRENCY}\n"
            f"- Total orders: {report.order_count}\n"
            f"- Top selling items: {top}\n"
            f"- Revenue by payment method: {by_method or 'none'}"
        )
        try:
            return _response_text(await self._generate(self._text_model, _text_body(prompt)))
        except AdvisoryServiceError as exc:
            logger.warning("summarize_sales failed: %s", exc)
            return SUMMARY_FALLBACK

    async def answer_query(self, question: str, context: AdvisoryContext, now: datetime | None = None) -> str:
        """Answer a staff question using only the given restaurant snapshot."""
        now = now or datetime.now(timezone.utc)
        today = [sale for sale in context.sales if local_day(sale.timestamp) == local_day(now)]
        revenue_today = sum(sale.total for sale in today)
        menu = "\n".join(f"{item.name} ({item.price:.0f} {CURRENCY}) - {item.category}" for item in context.menu)
        tables = "\n".join(f"Table '{t.name}' ({t.capacity} seats) is {t.status}" for t in context.tables)
        inventory = "\n".join(f"{item.name}: {item.stock:.2f} {item.unit}" for item in context.inventory)
        prompt = (
            f'You are the assistant for the "{RESTAURANT_NAME}" restaurant. Be helpful, concise and a little playful. '
            "Answer ONLY from the context below. If the answer is not in the context, reply "
            f'"{NOT_IN_CONTEXT}"\n\n'
            f"MENU:\n{menu}\n---\nTABLES:\n{tables}\n---\nINVENTORY:\n{inventory}\n---\n"
            f"SALES TODAY:\n- Revenue: {revenue_today:.0f} {CURRENCY}\n- Orders: {len(today)}\n---\n"
            f'Question: "{question}"'
        )
        try:
            return _response_text(await self._generate(self._text_model, _text_body(prompt)))
        except AdvisoryServiceError as exc:
            logger.warning("answer_query failed: %s", exc)
            return ANSWER_FALLBACK

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _generate(self, model: str, body: dict[str, Any]) -> dict[str, Any]:
        if not self._api_key:
            raise AdvisoryServiceError("Advisory service is not configured.")
        url = f"{self._base_url}/models/{model}:generateContent"
        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}
        try:
            if self._client is not None:
                resp = await self._client.post(url, json=body, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(url, json=body, headers=headers)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as exc:
            raise AdvisoryServiceError(f"Gemini request failed: {exc}") from exc
        except ValueError as exc:
            raise AdvisoryServiceError("Gemini returned a non-JSON body") from exc


def _text_body(prompt: str) -> dict[str, Any]:
    return {"contents": [{"parts": [{"text": prompt}]}]}


def _response_parts(data: dict[str, Any]) -> list[dict[str, Any]]:
    try:
        return list(data["candidates"][0]["content"]["parts"])
    except (KeyError, IndexError, TypeError) as exc:
        raise AdvisoryServiceError("Gemini response has no content parts") from exc


def _response_text(data: dict[str, Any]) -> str:
    text = "".join(part.get("text", "") for part in _response_parts(data)).strip()
    if not text:
        raise AdvisoryServiceError("Gemini response has no text")
    return text
