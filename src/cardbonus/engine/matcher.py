def normalize_category(name: str | None) -> str:
    return (name or "").strip().casefold()


def matches(bonus_category_name: str | None, requested_category_name: str | None) -> bool:
    requested = normalize_category(requested_category_name)
    if not requested:
        return False
    return normalize_category(bonus_category_name) == requested
