"""Header-driven selection of representation handlers.

A RepresentationTable maps media-type tokens found in one request header
(``Accept`` for reads, ``Content-Type`` for writes) to handlers. Each
restricted route owns a set of tokens; token sets within a table are
disjoint. An optional fallback route has no restriction and is chosen when no
restricted route matches.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from starlette.datastructures import Headers

from .exceptions import AmbiguousRepresentationError

logger = logging.getLogger(__name__)

H = TypeVar("H")


def header_tokens(headers: Headers, header_name: str) -> set[str]:
    """Collect the comma-separated, whitespace-trimmed tokens of every instance of a header."""
    tokens: set[str] = set()
    for value in headers.getlist(header_name):
        for token in value.split(","):
            token = token.strip()
            if token:
                tokens.add(token)
    return tokens


class RequestHeaderMatchesMediaType:
    """Predicate: the named header carries at least one of the given media types.

    Comparison is exact and case-sensitive.
    """

    def __init__(self, header_name: str, media_types: Sequence[str]):
        if not media_types:
            raise ValueError("At least one media type is required")
        self.header_name = header_name
        self.media_types = frozenset(media_types)

    def __call__(self, headers: Headers) -> bool:
        return not self.media_types.isdisjoint(header_tokens(headers, self.header_name))

    def __repr__(self) -> str:
        return f"RequestHeaderMatchesMediaType({self.header_name!r}, {sorted(self.media_types)!r})"


@dataclass(frozen=True)
class RepresentationRoute(Generic[H]):
    """A handler together with the condition under which it applies."""

    name: str
    handler: H
    media_types: tuple[str, ...]
    predicate: Optional[RequestHeaderMatchesMediaType] = None

    @property
    def media_type(self) -> str:
        """Media type used for responses produced by this route."""
        return self.media_types[0]

    @property
    def is_fallback(self) -> bool:
        return self.predicate is None


class RepresentationTable(Generic[H]):
    """Ordered routing table evaluated against request headers."""

    def __init__(self, header_name: str):
        self.header_name = header_name
        self._routes: list[RepresentationRoute[H]] = []
        self._fallback: Optional[RepresentationRoute[H]] = None

    @property
    def routes(self) -> list[RepresentationRoute[H]]:
        return list(self._routes)

    @property
    def fallback(self) -> Optional[RepresentationRoute[H]]:
        return self._fallback

    @property
    def media_types(self) -> list[str]:
        """Every token registered on a restricted route, in registration order."""
        return [
            media_type
            for route in self._routes
            for media_type in route.media_types
        ]

    def register(self, name: str, handler: H, media_types: Sequence[str]) -> RepresentationRoute[H]:
        """
        Add a restricted route.

        Raises:
            ValueError: If a token is already owned by another route
        """
        predicate = RequestHeaderMatchesMediaType(self.header_name, media_types)
        for route in self._routes:
            overlap = route.predicate.media_types & predicate.media_types
            if overlap:
                raise ValueError(
                    f"Media types {sorted(overlap)} of '{name}' are already registered by '{route.name}'"
                )

        route = RepresentationRoute(
            name=name,
            handler=handler,
            media_types=tuple(media_types),
            predicate=predicate,
        )
        self._routes.append(route)
        return route

    def register_fallback(
        self, name: str, handler: H, media_type: str = "application/json"
    ) -> RepresentationRoute[H]:
        """Set the unrestricted route used when nothing else matches."""
        if self._fallback is not None:
            raise ValueError(f"Fallback already registered as '{self._fallback.name}'")
        self._fallback = RepresentationRoute(
            name=name, handler=handler, media_types=(media_type,)
        )
        return self._fallback

    def eligible(self, headers: Headers) -> list[RepresentationRoute[H]]:
        """Restricted routes whose predicate accepts the headers."""
        return [route for route in self._routes if route.predicate(headers)]

    def select(self, headers: Headers) -> Optional[RepresentationRoute[H]]:
        """
        Pick the route for a request.

        Returns the single matching restricted route, else the fallback, else
        None.

        Raises:
            AmbiguousRepresentationError: If more than one restricted route matches
        """
        matches = self.eligible(headers)
        if len(matches) > 1:
            candidates = [route.name for route in matches]
            logger.error(
                "Ambiguous representation selection",
                extra={"header": self.header_name, "candidates": candidates},
            )
            raise AmbiguousRepresentationError(self.header_name, candidates)
        if matches:
            return matches[0]
        return self._fallback
