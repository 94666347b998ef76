"""
Translate a clean argument set into an Elasticsearch search request.
Only keys the parameter schema let through arrive here; False means "filter not set".
"""

import logging
from datetime import date, timedelta
from typing import Any

from swp_api.config import Settings
from swp_api.search.sanitizers import absint, to_bool

logger = logging.getLogger(__name__)

_RANGE_OPS = {">": "gt", ">=": "gte", "<": "lt", "<=": "lte"}


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _split_terms(value: Any) -> list[str]:
    """Terms as a list of trimmed strings ("a, b" -> ["a", "b"])."""
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value).split(",")
    return [str(item).strip() for item in items if str(item).strip()]


def _ids(value: Any) -> list[str]:
    return [str(item).strip() for item in _as_list(value) if str(item).strip()]


def tax_query_clause(query: dict[str, Any]) -> tuple[str, dict[str, Any]] | None:
    """Return (bool occurrence, clause) for a taxonomy filter, or None when it has no terms."""
    terms = _split_terms(query["terms"])
    if not terms:
        return None
    path = f"taxonomies.{query['taxonomy']}.{query['field']}"
    operator = str(query.get("operator", "IN")).upper()
    if operator == "NOT IN":
        return "must_not", {"terms": {path: terms}}
    if operator == "AND":
        return "filter", {"bool": {"filter": [{"term": {path: term}} for term in terms]}}
    return "filter", {"terms": {path: terms}}


def meta_query_clause(query: dict[str, Any]) -> tuple[str, dict[str, Any]] | None:
    """Return (bool occurrence, clause) for a meta filter. Unknown compare operators are ignored."""
    path = f"meta.{query['key']}"
    compare = str(query["compare"]).strip().upper() or "="
    value = query["value"]
    if compare == "=":
        return "filter", {"term": {path: value}}
    if compare == "!=":
        return "must_not", {"term": {path: value}}
    if compare in _RANGE_OPS:
        return "filter", {"range": {path: {_RANGE_OPS[compare]: value}}}
    if compare == "LIKE":
        return "filter", {"match": {path: value}}
    if compare == "NOT LIKE":
        return "must_not", {"match": {path: value}}
    if compare == "IN":
        return "filter", {"terms": {path: _split_terms(value)}}
    if compare == "NOT IN":
        return "must_not", {"terms": {path: _split_terms(value)}}
    if compare == "EXISTS":
        return "filter", {"exists": {"field": path}}
    if compare == "NOT EXISTS":
        return "must_not", {"exists": {"field": path}}
    logger.warning("meta_query: unsupported compare %r ignored", compare)
    return None


def date_query_clause(query: dict[str, Any], date_field: str) -> tuple[str, dict[str, Any]] | None:
    """One-day range on the date field. An impossible date drops the filter."""
    try:
        day = date(absint(query["year"]), absint(query["month"]), absint(query["day"]))
        next_day = day + timedelta(days=1)
    except (ValueError, OverflowError):
        logger.warning("date_query: invalid date %r ignored", query)
        return None
    return "filter", {
        "range": {
            date_field: {
                "gte": day.isoformat(),
                "lt": next_day.isoformat(),
                "format": "strict_date",
            }
        }
    }


def build_search_body(args: dict[str, Any], settings: Settings) -> dict[str, Any]:
    """Elasticsearch request body (query, from, size, _source) for a clean argument set."""
    occurrences: dict[str, list[dict[str, Any]]] = {"must": [], "filter": [], "must_not": []}

    text = args.get("s") or ""
    if text:
        occurrences["must"].append(
            {
                "multi_match": {
                    "query": text,
                    "fields": list(settings.search_fields),
                    "fuzziness": "AUTO",
                }
            }
        )

    if args.get("post__in"):
        occurrences["filter"].append({"ids": {"values": _ids(args["post__in"])}})
    if args.get("post__not_in"):
        occurrences["must_not"].append({"ids": {"values": _ids(args["post__not_in"])}})

    clauses = []
    if args.get("tax_query"):
        clauses.append(tax_query_clause(args["tax_query"]))
    if args.get("meta_query"):
        clauses.append(meta_query_clause(args["meta_query"]))
    if args.get("date_query"):
        clauses.append(date_query_clause(args["date_query"], settings.date_field))
    for clause in clauses:
        if clause is not None:
            occurrence, body = clause
            occurrences[occurrence].append(body)

    bool_query = {name: items for name, items in occurrences.items() if items}
    query = {"bool": bool_query} if bool_query else {"match_all": {}}

    if to_bool(args.get("nopaging", 0)):
        offset, size = 0, settings.nopaging_max_results
    else:
        # posts_per_page=0 falls back to the site default, like the content platform does
        size = absint(args.get("posts_per_page")) or settings.posts_per_page
        page = max(absint(args.get("page", 1)), 1)
        offset = (page - 1) * size

    body: dict[str, Any] = {"query": query, "from": offset, "size": size}
    if not to_bool(args.get("load_posts", 1)):
        body["_source"] = False
    return body
