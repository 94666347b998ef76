"""
Policy hooks and the permission gate.
A PolicySet is injected into the dispatcher: it can reshape the parameter schema,
change the posts_per_page cap, and decide whether a request may search at all.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from jose import JWTError, jwt

from swp_api.cache.redis_client import get_redis

logger = logging.getLogger(__name__)

SchemaMutator = Callable[[dict[str, Any]], dict[str, Any]]
MaxPostsProvider = Callable[[int], int]
# (allowed so far, request) -> bool, sync or async
PermissionPredicate = Callable[[bool, Any], bool | Awaitable[bool]]


@dataclass(frozen=True)
class PolicySet:
    """Optional overrides; anything left as None keeps the stock behaviour."""

    schema_mutator: SchemaMutator | None = None
    max_posts_per_page: MaxPostsProvider | None = None
    permission: PermissionPredicate | None = None

    def apply_schema(self, schema: dict[str, Any]) -> dict[str, Any]:
        if self.schema_mutator is None:
            return schema
        return dict(self.schema_mutator(dict(schema)))

    def resolve_max_posts_per_page(self, default: int) -> int:
        if self.max_posts_per_page is None:
            return default
        return int(self.max_posts_per_page(default))


async def is_allowed(request: Any, policy: PolicySet) -> bool:
    """Permission gate. Public by default; the policy's predicate gets the final say."""
    allowed = True
    if policy.permission is not None:
        decision = policy.permission(allowed, request)
        if inspect.isawaitable(decision):
            decision = await decision
        allowed = decision
    return bool(allowed)


def _client_host(request: Any) -> str | None:
    client = getattr(request, "client", None)
    return getattr(client, "host", None)


def all_of(*predicates: PermissionPredicate) -> PermissionPredicate:
    """Combine predicates; the first deny wins."""

    async def predicate(allowed: bool, request: Any) -> bool:
        for check in predicates:
            decision = check(allowed, request)
            if inspect.isawaitable(decision):
                decision = await decision
            allowed = bool(decision)
            if not allowed:
                return False
        return allowed

    return predicate


def ip_allow_list(addresses: list[str]) -> PermissionPredicate:
    """Only clients whose host is listed may search."""
    permitted = frozenset(addresses)

    def predicate(allowed: bool, request: Any) -> bool:
        host = _client_host(request)
        if host not in permitted:
            logger.info("search denied: client %s not in allow-list", host)
            return False
        return allowed

    return predicate


def bearer_token_required(secret_key: str, algorithm: str = "HS256") -> PermissionPredicate:
    """Require a valid JWT in the Authorization header."""

    def predicate(allowed: bool, request: Any) -> bool:
        header = request.headers.get("authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return False
        try:
            jwt.decode(token, secret_key, algorithms=[algorithm])
        except JWTError:
            logger.info("search denied: invalid bearer token")
            return False
        return allowed

    return predicate


def redis_rate_limit(limit: int, window_seconds: int = 60, redis_factory=get_redis) -> PermissionPredicate:
    """Fixed-window request budget per client host. When Redis is down requests are let through."""

    async def predicate(allowed: bool, request: Any) -> bool:
        key = f"swp_api:rate:{_client_host(request) or 'unknown'}"
        try:
            client = await redis_factory()
            count = await client.incr(key)
            if count == 1:
                await client.expire(key, window_seconds)
        except Exception as e:
            logger.warning("rate limit check skipped: %s", e)
            return allowed
        if count > limit:
            logger.info("search denied: rate limit exceeded for %s", key)
            return False
        return allowed

    return predicate


def build_policy_set(settings) -> PolicySet:
    """PolicySet from settings: stock schema and page cap, permission from the enabled access checks."""
    checks: list[PermissionPredicate] = []
    if settings.allowed_ips:
        checks.append(ip_allow_list(settings.allowed_ips))
    if settings.require_auth:
        checks.append(bearer_token_required(settings.secret_key, settings.jwt_algorithm))
    if settings.rate_limit_per_minute > 0:
        checks.append(redis_rate_limit(settings.rate_limit_per_minute, 60))
    return PolicySet(permission=all_of(*checks) if checks else None)
