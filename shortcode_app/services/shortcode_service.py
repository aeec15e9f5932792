import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import AnyUrl, TypeAdapter, ValidationError

from shortcode_app.cache.strategies import CacheStrategy
from shortcode_app.errors import InvalidShortcodeRequest
from shortcode_app.schemas.shortcode import (
    RequestContext,
    ShortcodeResponse,
    ShortcodeStats,
    format_shortcode_record,
)
from shortcode_app.services.short_code_strategies import ShortCodeStrategy
from shortcode_app.storage.factory import CollectionSet
from shortcode_app.storage.strategies import StoredRecord, matches


logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyUrl)


@dataclass
class Found:
    record: ShortcodeResponse


@dataclass
class NotFound:
    shortcode: str


@dataclass
class LookupFailed:
    shortcode: str
    error: Exception


LookupResult = Union[Found, NotFound, LookupFailed]


class ShortcodeService:
    """
    Shortcode lifecycle: validation, creation with its audit entry,
    resolution and invocation audit.

    Collections, cache and generator are injected, so tests can hand in
    in-memory versions.
    """
    
    def __init__(
        self,
        collections: CollectionSet,
        generator: ShortCodeStrategy,
        cache: Optional[CacheStrategy] = None,
        allowed_statuses: Tuple[int, ...] = (301, 302, 303, 307, 308),
        default_status: int = 301,
        cache_ttl: int = 3600,
    ):
        self.collections = collections
        self.generator = generator
        self.cache = cache
        self.allowed_statuses = tuple(allowed_statuses)
        self.default_status = default_status
        self.cache_ttl = cache_ttl

    def validate(self, body: Dict[str, Any]) -> Tuple[str, int]:
        """
        Check a creation body and return ``(redirect, status)``.

        Checks run in order: redirect present, redirect is an absolute URL,
        status is an integer in the allowed set.

        Raises:
            InvalidShortcodeRequest: with the message sent back to the client
        """
        redirect = body.get("redirect")
        if not redirect:
            raise InvalidShortcodeRequest("No redirect URI provided")
        if not isinstance(redirect, str):
            raise InvalidShortcodeRequest("Invalid URL")

        try:
            _url_adapter.validate_python(redirect)
        except ValidationError as e:
            raise InvalidShortcodeRequest(e.errors()[0]["msg"])

        raw_status = body.get("status", self.default_status)
        if isinstance(raw_status, bool):
            raise InvalidShortcodeRequest("Invalid status")
        try:
            status = int(raw_status)
        except (TypeError, ValueError) as e:
            raise InvalidShortcodeRequest(str(e))

        if status not in self.allowed_statuses:
            raise InvalidShortcodeRequest("Invalid status")

        return redirect, status

    async def create_shortcode(
        self,
        body: Dict[str, Any],
        context: RequestContext
    ) -> ShortcodeResponse:
        """
        Validate, mint a code, store the mapping and its creation audit.

        The two writes are independent; if the second one fails the mapping
        exists without a creation audit.
        """
        redirect, status = self.validate(body)

        shortcode = await self.generator.generate(self.collections.shortcodes)
        await self.collections.shortcodes.set(shortcode, {"redirect": redirect, "status": status})
        await self.collections.shortcode_creations.set(
            shortcode,
            {"shortcode": shortcode, **context.to_props()},
        )

        record = await self.collections.shortcodes.get(shortcode)
        response = format_shortcode_record(record)
        await self._cache_record(response)

        logger.info("Created shortcode %s -> %s (%s)", shortcode, redirect, status)
        return response

    async def resolve(self, shortcode: str) -> LookupResult:
        """
        Look up a shortcode.

        Never raises: storage errors come back as ``LookupFailed``.
        """
        try:
            cached = await self._cached_record(shortcode)
            if cached is not None:
                return Found(cached)

            record = await self.collections.shortcodes.get(shortcode)
            if record is None:
                return NotFound(shortcode)

            response = format_shortcode_record(record)
            await self._cache_record(response)
            return Found(response)
        except Exception as e:
            return LookupFailed(shortcode, e)

    async def record_invocation(self, shortcode: str, context: RequestContext) -> str:
        """Store one invocation audit entry and return its id."""
        invocation = str(uuid.uuid4())
        await self.collections.shortcode_invocations.set(
            invocation,
            {"invocation": invocation, "shortcode": shortcode, **context.to_props()},
        )
        return invocation

    async def record_invocation_safely(self, shortcode: str, context: RequestContext) -> Optional[str]:
        """Background-task wrapper: audit failures are logged, not raised."""
        try:
            return await self.record_invocation(shortcode, context)
        except Exception:
            logger.exception("Failed to record invocation of %s", shortcode)
            return None

    async def get_shortcode_stats(self, shortcode: str) -> Optional[ShortcodeStats]:
        """Shortcode with its creation audit and every invocation."""
        record = await self.collections.shortcodes.get(shortcode)
        if record is None:
            return None

        creation = await self.collections.shortcode_creations.get(shortcode)
        invocations: List[StoredRecord] = await self.collections.shortcode_invocations.filter(
            matches({"shortcode": shortcode})
        )
        invocations.sort(key=lambda r: (r.created is None, r.created))

        return ShortcodeStats(
            **format_shortcode_record(record).model_dump(),
            creation=creation.props if creation else None,
            invocations=[r.props for r in invocations],
        )

    async def _cached_record(self, shortcode: str) -> Optional[ShortcodeResponse]:
        if not self.cache:
            return None
        cached = await self.cache.get(self._cache_key(shortcode))
        if not cached:
            return None
        return ShortcodeResponse(shortcode=shortcode, **json.loads(cached))

    async def _cache_record(self, record: ShortcodeResponse) -> None:
        if self.cache:
            value = json.dumps({"redirect": record.redirect, "status": record.status})
            await self.cache.set(self._cache_key(record.shortcode), value, ttl=self.cache_ttl)

    @staticmethod
    def _cache_key(shortcode: str) -> str:
        return f"shortcode:{shortcode}"
