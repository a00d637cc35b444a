"""
Substring search helpers for ILIKE filters
"""
LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """``%term%`` with the term's own ``%``/``_`` matched literally"""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"
