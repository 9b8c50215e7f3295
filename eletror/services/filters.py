"""Search and category filtering for items and contacts, plus dashboard totals.

Pure functions; callers recompute on every change rather than caching.
"""

from collections.abc import Iterable

from eletror.schemas.contacts import Contact, ContactType
from eletror.schemas.inventory import ALL_CATEGORIES, Category, InventoryItem, InventorySummary


def _matches(query: str, *fields: str) -> bool:
    needle = query.lower()
    return any(needle in (field or "").lower() for field in fields)


def filter_items(
    items: Iterable[InventoryItem],
    query: str = "",
    category: Category | str = ALL_CATEGORIES,
) -> list[InventoryItem]:
    """Items whose name or description contains query (case-insensitive) in the given category."""
    selected = category.value if isinstance(category, Category) else category
    return [
        item
        for item in items
        if _matches(query, item.name, item.description)
        and (selected == ALL_CATEGORIES or item.category.value == selected)
    ]


def filter_contacts(
    contacts: Iterable[Contact],
    query: str = "",
    contact_type: ContactType | None = None,
) -> list[Contact]:
    """Contacts whose name, nif or email contains query, optionally of one type."""
    return [
        contact
        for contact in contacts
        if (contact_type is None or contact.type == contact_type)
        and _matches(query, contact.name, contact.nif, contact.email)
    ]


def inventory_summary(items: Iterable[InventoryItem]) -> InventorySummary:
    """Count of items, units in stock and stock value."""
    items = list(items)
    return InventorySummary(
        item_count=len(items),
        total_units=sum(i.quantity for i in items),
        total_value=round(sum(i.quantity * i.price for i in items), 2),
    )
