# portal/service_layer/normalize.py
from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, RootModel, ValidationError, model_validator

from ..schemas import CanonicalPage

log = logging.getLogger(__name__)

_INT_KEY = re.compile(r"^\s*[+-]?\d+\s*$")


class ShapeKind(str, Enum):
    bare_list = "bare_list"
    items = "items"
    properties = "properties"
    data = "data"
    categories = "categories"
    integer_keyed = "integer_keyed"
    unrecognized = "unrecognized"
    empty = "empty"


# -------------------------
# Known upstream envelopes
# -------------------------
# strict=True: a tuple/str/dict never passes as list, so each decoder either
# matches its exact shape or falls through to the next one.


class _Envelope(BaseModel):
    model_config = ConfigDict(strict=True, extra="allow")


class _BareList(RootModel[list[Any]]):
    model_config = ConfigDict(strict=True)


class _ItemsEnvelope(_Envelope):
    items: list[Any]


class _PropertiesEnvelope(_Envelope):
    properties: list[Any]
    totalPages: Any = None
    urls: Any = None


class _DataEnvelope(_Envelope):
    data: list[Any]


class _CategoriesEnvelope(_Envelope):
    categories: list[Any]


class _IntegerKeyedMap(RootModel[dict[str, Any]]):
    """An array that was serialized as {"0": ..., "1": ...}."""

    model_config = ConfigDict(strict=True)

    @model_validator(mode="after")
    def _keys_are_integers(self) -> "_IntegerKeyedMap":
        if not self.root:
            raise ValueError("empty object")
        if not all(_INT_KEY.match(k) for k in self.root):
            raise ValueError("non-integer key")
        return self

    def ordered_values(self) -> list[Any]:
        return [self.root[k] for k in sorted(self.root, key=lambda k: int(k))]


@dataclass(frozen=True)
class _Decoded:
    items: list[Any]
    total_pages: Any = None
    urls: Any = None


def _decode_bare_list(body: Any) -> _Decoded:
    return _Decoded(items=_BareList.model_validate(body).root)


def _decode_items(body: Any) -> _Decoded:
    env = _ItemsEnvelope.model_validate(body)
    extra = env.model_extra or {}
    return _Decoded(items=env.items, total_pages=extra.get("totalPages"), urls=extra.get("urls"))


def _decode_properties(body: Any) -> _Decoded:
    env = _PropertiesEnvelope.model_validate(body)
    return _Decoded(items=env.properties, total_pages=env.totalPages, urls=env.urls)


def _decode_data(body: Any) -> _Decoded:
    return _Decoded(items=_DataEnvelope.model_validate(body).data)


def _decode_categories(body: Any) -> _Decoded:
    return _Decoded(items=_CategoriesEnvelope.model_validate(body).categories)


def _decode_integer_keyed(body: Any) -> _Decoded:
    return _Decoded(items=_IntegerKeyedMap.model_validate(body).ordered_values())


Decoder = Callable[[Any], _Decoded]

# First match wins: array-like before keyed, most specific key before generic ones.
LISTING_DECODERS: tuple[tuple[ShapeKind, Decoder], ...] = (
    (ShapeKind.bare_list, _decode_bare_list),
    (ShapeKind.items, _decode_items),
    (ShapeKind.properties, _decode_properties),
    (ShapeKind.data, _decode_data),
    (ShapeKind.integer_keyed, _decode_integer_keyed),
)


class _CategoryEntries(RootModel[list[dict[str, Any]]]):
    model_config = ConfigDict(strict=True)


def _objects_only(decoder: Decoder) -> Decoder:
    """Categories are rendered as objects; an envelope of bare strings or numbers is not a match."""

    def _decode(body: Any) -> _Decoded:
        decoded = decoder(body)
        return _Decoded(items=_CategoryEntries.model_validate(decoded.items).root)

    return _decode


CATEGORY_DECODERS: tuple[tuple[ShapeKind, Decoder], ...] = (
    (ShapeKind.bare_list, _objects_only(_decode_bare_list)),
    (ShapeKind.items, _objects_only(_decode_items)),
    (ShapeKind.categories, _objects_only(_decode_categories)),
    (ShapeKind.data, _objects_only(_decode_data)),
    (ShapeKind.integer_keyed, _objects_only(_decode_integer_keyed)),
)


@dataclass(frozen=True)
class NormalizedBody:
    shape: ShapeKind
    page: CanonicalPage
    raw: Any

    @property
    def recognized(self) -> bool:
        return self.shape != ShapeKind.unrecognized

    def response_body(self) -> Any:
        """What a pass-through caller should return: the raw body when the shape is unknown."""
        if self.shape == ShapeKind.unrecognized:
            return self.raw
        return self.page.model_dump(exclude_none=True)


def _total_pages(upstream: Any, count: int) -> int:
    if isinstance(upstream, int) and not isinstance(upstream, bool) and upstream >= 0:
        return upstream
    return 1 if count else 0


def decode(raw: Any, decoders: tuple[tuple[ShapeKind, Decoder], ...]) -> tuple[ShapeKind, _Decoded | None]:
    if raw is None or not isinstance(raw, (list, dict)):
        return ShapeKind.empty, None

    for kind, decoder in decoders:
        try:
            return kind, decoder(raw)
        except ValidationError:
            continue
    return ShapeKind.unrecognized, None


def normalize(raw: Any) -> NormalizedBody:
    """
    Reduce any upstream listing body to a CanonicalPage. Never raises.
    totalItems always counts the properties actually returned; upstream totals
    are disregarded.
    """
    kind, decoded = decode(raw, LISTING_DECODERS)

    if decoded is None:
        if kind == ShapeKind.unrecognized:
            log.info("unrecognized listing body, keys=%s", sorted(raw.keys())[:20])
        return NormalizedBody(shape=kind, page=CanonicalPage(), raw=raw)

    items = list(decoded.items)
    urls = decoded.urls if isinstance(decoded.urls, dict) else None
    page = CanonicalPage(
        properties=items,
        totalItems=len(items),
        totalPages=_total_pages(decoded.total_pages, len(items)),
        urls=urls,
    )
    log.debug("normalized listing body shape=%s count=%d", kind.value, len(items))
    return NormalizedBody(shape=kind, page=page, raw=raw)


def extract_categories(raw: Any) -> list[dict[str, Any]] | None:
    """Category list from any recognized envelope; None when the body can't be read safely."""
    _, decoded = decode(raw, CATEGORY_DECODERS)
    if decoded is None:
        return None
    return list(decoded.items)
