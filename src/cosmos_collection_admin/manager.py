# Cosmos Collection Admin
# File: manager.py
# Version: v2

"""Collection lifecycle operations over the Cosmos DB REST interface.

Implements:

- collection_exists() via GET dbs/{db}/colls/{coll}
- create_collection() via POST dbs/{db}/colls
- update_throughput() via collection GET, offers query, offer PUT
- update_indexes() via collection GET then PUT

Nothing is cached between calls and nothing is retried. The read and the
write of update_throughput() / update_indexes() are not conditional, so a
concurrent change between them is overwritten.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Optional

from .config import AdminConfig, ConnectionContext
from .errors import CosmosAdminError, CosmosConnectionError, NotFoundError
from .indexing import new_collection, rebuild_collection
from .models import CollectionEntity, OfferEntity, SearchOffersEntity
from .transport import QUERY_CONTENT_TYPE, CosmosHttpTransport, HttpResult

logger = logging.getLogger(__name__)

THROUGHPUT_HEADER = "x-ms-offer-throughput"
IS_QUERY_HEADER = "x-ms-documentdb-isquery"


def offer_query(resource_id: str) -> dict:
    """Query body selecting the offer that governs ``resource_id``."""
    return {
        "query": f'SELECT * FROM root WHERE (root["offerResourceId"] = "{resource_id}")'
    }


@dataclass(frozen=True)
class OperationResult:
    """Uniform outcome of any manager operation."""

    ok: bool
    value: Any = None
    error_code: Optional[str] = None
    message: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict = {"ok": self.ok, "value": self.value}
        if not self.ok:
            out["error"] = {"code": self.error_code, "message": self.message}
        return out


async def run_operation(call: Callable[[], Awaitable[Any]]) -> OperationResult:
    """Run one operation and fold its outcome into an OperationResult.

    Manager methods already log their own failures, so nothing is logged here.
    """
    try:
        value = await call()
    except CosmosAdminError as exc:
        return OperationResult(ok=False, error_code=exc.code, message=exc.message)
    except Exception as exc:  # noqa: BLE001
        return OperationResult(ok=False, error_code=type(exc).__name__, message=str(exc))
    return OperationResult(ok=True, value=value)


@dataclass
class CollectionManager:
    """Administers one partitioned collection."""

    context: ConnectionContext
    transport: CosmosHttpTransport
    logger: logging.Logger = field(default=logger)

    @classmethod
    def from_config(
        cls,
        config: AdminConfig,
        log: Optional[logging.Logger] = None,
    ) -> "CollectionManager":
        context = config.to_context()
        transport = CosmosHttpTransport(
            context=context,
            api_version=config.api_version,
            timeout=float(config.http_timeout_seconds),
            verify_tls=config.verify_tls,
        )
        return cls(context=context, transport=transport, logger=log or logger)

    # ------------------------------------------------------------------
    # Existence
    # ------------------------------------------------------------------

    async def collection_exists(self, correlation_id: str) -> bool:
        """Return True if the collection exists, False on a 404."""
        try:
            self.context.validate()
            link = self.context.collection_link
            result = await self.transport.execute("GET", "colls", link, link)

            if result.is_success:
                self._info(correlation_id, "collection_exists", "Collection '%s' exists.")
                return True
            if result.is_not_found:
                self._info(correlation_id, "collection_exists", "Collection '%s' doesn't exist.")
                return False

            raise self._connection_error(
                correlation_id,
                f"Error while checking that collection '{self.context.collection}' "
                "already exists.",
                result,
            )
        except Exception as exc:
            self._failed(
                correlation_id,
                "collection_exists",
                "Failed to check that the collection '%s' already exists "
                "in the database '%s'.",
                exc,
            )
            raise

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_collection(
        self,
        correlation_id: str,
        throughput: int,
        index_names: Iterable[str],
    ) -> None:
        """Create the partitioned collection with the given throughput."""
        try:
            self.context.validate()
            body = new_collection(self.context, list(index_names or []))
            result = await self.transport.execute(
                "POST",
                "colls",
                self.context.database_link,
                f"{self.context.database_link}/colls",
                extra_headers={THROUGHPUT_HEADER: str(int(throughput))},
                body=body.to_dict(),
            )

            if not result.is_success:
                raise self._connection_error(
                    correlation_id,
                    f"Error while creating collection '{self.context.collection}'.",
                    result,
                )

            self._info(correlation_id, "create_collection", "Collection '%s' created.")
        except Exception as exc:
            self._failed(
                correlation_id,
                "create_collection",
                "Failed to create the collection '%s' in the database '%s'.",
                exc,
            )
            raise

    # ------------------------------------------------------------------
    # Throughput
    # ------------------------------------------------------------------

    async def update_throughput(self, correlation_id: str, throughput: int) -> bool:
        """Change provisioned throughput; report failure as False."""
        try:
            await self._apply_throughput(correlation_id, throughput)
        except Exception as exc:
            self._failed(
                correlation_id,
                "update_throughput",
                "Failed to update throughput of the collection '%s' "
                "in the database '%s'.",
                exc,
            )
            return False
        return True

    async def set_throughput(self, correlation_id: str, throughput: int) -> OfferEntity:
        """Raising variant of update_throughput(); returns the stored offer."""
        try:
            return await self._apply_throughput(correlation_id, throughput)
        except Exception as exc:
            self._failed(
                correlation_id,
                "set_throughput",
                "Failed to update throughput of the collection '%s' "
                "in the database '%s'.",
                exc,
            )
            raise

    async def _apply_throughput(self, correlation_id: str, throughput: int) -> OfferEntity:
        self.context.validate()

        # 1. Collection, for its resource id
        collection = await self._fetch_collection(correlation_id, "update_throughput")

        # 2. Offer governing that resource id
        offer = await self._find_offer(correlation_id, collection)
        self._info(
            correlation_id,
            "update_throughput",
            "The current throughput of collection '%s' is: '%s'.",
            offer.content.offer_throughput,
        )

        # 3. Offer with the new throughput
        updated = offer.with_throughput(throughput)
        offer_link = updated.id.lower()
        result = await self.transport.execute(
            "PUT",
            "offers",
            offer_link,
            f"offers/{offer_link}",
            body=updated.to_dict(),
        )
        if not result.is_success:
            raise self._connection_error(
                correlation_id,
                "Error while updating throughput of collection "
                f"'{self.context.collection}'.",
                result,
            )

        # The write has been applied; an unreadable echo does not undo it.
        try:
            stored = OfferEntity.from_dict(result.json()) or updated
        except ValueError:
            stored = updated
        self._info(
            correlation_id,
            "update_throughput",
            "The updated throughput of collection '%s' is: '%s'.",
            stored.content.offer_throughput,
        )
        return stored

    # ------------------------------------------------------------------
    # Indexing policy
    # ------------------------------------------------------------------

    async def update_indexes(self, correlation_id: str, index_names: Iterable[str]) -> None:
        """Replace the hash-indexed fields of the collection.

        Excluded paths and the partition key of the existing collection are
        kept as they are.
        """
        try:
            self.context.validate()
            prior = await self._fetch_collection(correlation_id, "update_indexes")

            link = self.context.collection_link
            body = rebuild_collection(prior, list(index_names or []))
            result = await self.transport.execute(
                "PUT", "colls", link, link, body=body.to_dict()
            )

            if not result.is_success:
                raise self._connection_error(
                    correlation_id,
                    f"Error while updating collection '{self.context.collection}'.",
                    result,
                )

            self._info(correlation_id, "update_indexes", "Collection '%s' updated.")
        except Exception as exc:
            self._failed(
                correlation_id,
                "update_indexes",
                "Failed to update the collection '%s' in the database '%s'.",
                exc,
            )
            raise

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _fetch_collection(self, correlation_id: str, operation: str) -> CollectionEntity:
        link = self.context.collection_link
        result = await self.transport.execute("GET", "colls", link, link)

        if result.is_not_found:
            raise NotFoundError(
                f"Unable to find collection '{self.context.collection}'. "
                f"Response Content: {result.text}",
                correlation_id=correlation_id,
            )
        if not result.is_success:
            raise self._connection_error(
                correlation_id,
                f"Error while getting info about collection '{self.context.collection}'.",
                result,
            )

        collection = CollectionEntity.from_dict(result.json())
        if collection is None:
            raise NotFoundError(
                f"Unable to find collection '{self.context.collection}'. "
                f"Response Content: {result.text}",
                correlation_id=correlation_id,
            )

        self._info(correlation_id, operation, "Found collection '%s'.")
        return collection

    async def _find_offer(self, correlation_id: str, collection: CollectionEntity) -> OfferEntity:
        result = await self.transport.execute(
            "POST",
            "offers",
            "",
            "offers",
            extra_headers={IS_QUERY_HEADER: "True"},
            body=offer_query(collection.resource_id or ""),
            content_type=QUERY_CONTENT_TYPE,
        )
        if not result.is_success:
            raise self._connection_error(
                correlation_id,
                f"Error while getting offer of collection '{self.context.collection}'.",
                result,
            )

        search = SearchOffersEntity.from_dict(result.json())
        offer = search.first() if search is not None else None
        if offer is None:
            raise NotFoundError(
                f"Unable to find offer of collection '{self.context.collection}'. "
                f"Response Content: {result.text}",
                correlation_id=correlation_id,
            )
        return offer

    def _connection_error(
        self,
        correlation_id: str,
        message: str,
        result: HttpResult,
    ) -> CosmosConnectionError:
        return CosmosConnectionError(
            f"{message} Response Content: {result.text}",
            correlation_id=correlation_id,
            status_code=result.status_code,
            response_body=result.text,
        )

    def _info(self, correlation_id: str, operation: str, message: str, *args: Any) -> None:
        self.logger.info(
            "[%s] %s: " + message,
            correlation_id,
            operation,
            self.context.collection,
            *args,
        )

    def _failed(
        self,
        correlation_id: str,
        operation: str,
        message: str,
        exc: BaseException,
    ) -> None:
        self.logger.error(
            "[%s] %s: " + message,
            correlation_id,
            operation,
            self.context.collection,
            self.context.database,
            exc_info=exc,
        )
