from gastos.models import OTHER, PENDING, Category

CATEGORIES: tuple[Category, ...] = (
    Category("salary", "Salary"),
    Category("rent", "Rent"),
    Category("groceries", "Groceries"),
    Category("dining", "Dining"),
    Category("transport", "Transport"),
    Category("utilities", "Utilities"),
    Category("entertainment", "Entertainment"),
    Category("health", "Health"),
    Category("travel", "Travel"),
    Category("shopping", "Shopping"),
    Category("education", "Education"),
    Category("pets", "Pets"),
    Category("subscriptions", "Subscriptions"),
    Category("savings", "Savings"),
    Category(OTHER, "Other"),
    Category(PENDING, "Pending Review"),
)


def get_category(category_id: str, catalog: tuple[Category, ...] = CATEGORIES) -> Category | None:
    for category in catalog:
        if category.id == category_id:
            return category
    return None


def category_name(category_id: str, catalog: tuple[Category, ...] = CATEGORIES) -> str:
    category = get_category(category_id, catalog)
    return category.name if category else category_id


def valid_category_ids(catalog: tuple[Category, ...] = CATEGORIES) -> list[str]:
    """Sorted ids a transaction may carry. The reserved sentinels are always valid."""
    ids = {category.id for category in catalog}
    ids.update((PENDING, OTHER))
    return sorted(ids)
