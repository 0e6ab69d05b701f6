"""
Declarative extraction rules and the interpreter that applies them.

A rule names a root scope, an optional item scope (list rules), and one
FieldRule per output field. Fields are best-effort: a missing node, an
empty value or a failed read yields the field's default and never aborts
the record. A missing root yields an empty list (list rules) or
NotFoundError (single-record rules).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Literal, Optional, TypeVar

from playwright.async_api import Locator, Page

from engine.constants import FIELD_READ_TIMEOUT_MS
from engine.errors import NotFoundError
from engine.text import Transform, normalize_whitespace
from shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Source = Literal["text", "first_text", "html", "attr", "property", "all_text"]

_FIRST_TEXT_JS = "el => el.childNodes.length ? el.childNodes[0].textContent : null"
_PROPERTY_JS = "(el, name) => { const v = el[name]; return v == null ? null : String(v); }"


@dataclass(frozen=True)
class FieldRule:
    """
    How to read one output field from a scope.

    selector=None reads the scope node itself. `name` is the attribute or DOM
    property for the attr/property sources.
    """

    field: str
    selector: Optional[str]
    source: Source = "text"
    name: Optional[str] = None
    transforms: tuple[Transform, ...] = ()
    default: Optional[str] = ""
    separator: str = ", "


@dataclass(frozen=True)
class ExtractionRule(Generic[T]):
    """Root scope, optional item scope, fields, and the record factory."""

    name: str
    root: str
    fields: tuple[FieldRule, ...]
    factory: Callable[..., T]
    item: Optional[str] = None


async def _read_raw(target: Locator, rule: FieldRule) -> Optional[str]:
    if rule.source == "text":
        return await target.text_content(timeout=FIELD_READ_TIMEOUT_MS)
    if rule.source == "first_text":
        return await target.evaluate(_FIRST_TEXT_JS, timeout=FIELD_READ_TIMEOUT_MS)
    if rule.source == "html":
        return await target.inner_html(timeout=FIELD_READ_TIMEOUT_MS)
    if rule.source == "attr":
        return await target.get_attribute(rule.name or "", timeout=FIELD_READ_TIMEOUT_MS)
    if rule.source == "property":
        return await target.evaluate(_PROPERTY_JS, rule.name, timeout=FIELD_READ_TIMEOUT_MS)
    raise ValueError(f"Unsupported field source: {rule.source!r}")


async def _read_field(scope: Locator, rule: FieldRule) -> Optional[str]:
    target = scope if rule.selector is None else scope.locator(rule.selector)

    if rule.source == "all_text":
        parts = [normalize_whitespace(t) for t in await target.all_text_contents()]
        value = rule.separator.join(p for p in parts if p)
    else:
        if rule.selector is not None:
            if await target.count() == 0:
                return rule.default
            target = target.first
        raw = await _read_raw(target, rule)
        if raw is None:
            return rule.default
        value = raw.strip() if rule.source == "html" else normalize_whitespace(raw)

    for transform in rule.transforms:
        value = transform(value)
    return value or rule.default


async def extract_fields(scope: Locator, rule: ExtractionRule[Any]) -> dict[str, Optional[str]]:
    """Run every field extractor of `rule` against one scope."""
    values: dict[str, Optional[str]] = {}
    for field_rule in rule.fields:
        try:
            values[field_rule.field] = await _read_field(scope, field_rule)
        except Exception as e:
            logger.debug(
                "field_extraction_failed",
                rule=rule.name,
                field=field_rule.field,
                error=str(e),
                error_type=type(e).__name__,
            )
            values[field_rule.field] = field_rule.default
    return values


async def extract_many(page: Page, rule: ExtractionRule[T]) -> list[T]:
    """Records for every item scope under the root, in document order; [] if no root."""
    if rule.item is None:
        raise ValueError(f"Rule {rule.name!r} has no item scope")
    root = page.locator(rule.root)
    if await root.count() == 0:
        logger.info("extraction_root_missing", rule=rule.name, root=rule.root)
        return []

    items = await root.locator(rule.item).all()
    records = [rule.factory(**await extract_fields(item, rule)) for item in items]
    logger.info("extraction_completed", rule=rule.name, count=len(records))
    return records


async def extract_one(page: Page, rule: ExtractionRule[T], **extra: Any) -> T:
    """One record from the first root match; NotFoundError if the root is absent."""
    root = page.locator(rule.root)
    if await root.count() == 0:
        logger.info("extraction_root_missing", rule=rule.name, root=rule.root)
        raise NotFoundError(f"{rule.name} root not found")

    values = await extract_fields(root.first, rule)
    logger.info("extraction_completed", rule=rule.name, count=1)
    return rule.factory(**values, **extra)
