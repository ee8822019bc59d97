"""Turn object addresses into call arguments using live ledger metadata."""

from __future__ import annotations

from typing import cast

from loguru import logger

from deepbook_client.errors import DeepBookError, ObjectFetchError, OwnershipMismatchError
from deepbook_client.models import ObjectMetadata, Ownership
from deepbook_client.rpc import LedgerReader
from deepbook_client.transactions.types import ObjectArg, OwnedObjectArg, SharedObjectArg
from deepbook_client.utils import normalize_address


class ObjectResolver:
    """Resolves addresses to shared or owned object arguments.

    Every resolution performs exactly one metadata fetch. Results are never
    cached because owned object versions change with each transaction.
    """

    def __init__(self, ledger: LedgerReader) -> None:
        self.ledger = ledger

    async def fetch(self, address: str) -> ObjectMetadata:
        """Parse ``address`` and fetch its metadata once.

        Raises:
            AddressParseError: If the address is malformed (no remote call is made).
            ObjectFetchError: If the ledger read fails.
        """
        object_id = normalize_address(address)
        try:
            return await self.ledger.get_object_metadata(object_id)
        except DeepBookError as exc:
            raise ObjectFetchError(f"Could not fetch object {object_id}: {exc}") from exc

    async def resolve(
        self,
        address: str,
        *,
        mutable: bool = True,
        expected: Ownership | None = None,
    ) -> ObjectArg:
        """Resolve ``address`` into a call argument.

        Args:
            address: Object id literal.
            mutable: Requested mutability for shared objects.
            expected: Ownership the call requires; a different ledger kind raises.

        Raises:
            OwnershipMismatchError: If the object's ownership does not fit the call.
        """
        metadata = await self.fetch(address)
        ownership = metadata.ownership
        if expected is not None and ownership is not expected:
            raise OwnershipMismatchError(metadata.object_id, expected.value, ownership.value)

        if ownership is Ownership.SHARED:
            if metadata.initial_shared_version is None:
                raise ObjectFetchError(
                    f"Shared object {metadata.object_id} has no initial shared version"
                )
            arg: ObjectArg = SharedObjectArg(
                object_id=metadata.object_id,
                initial_shared_version=metadata.initial_shared_version,
                mutable=mutable,
            )
        elif ownership in (Ownership.ADDRESS_OWNED, Ownership.IMMUTABLE):
            arg = OwnedObjectArg(
                object_id=metadata.object_id,
                version=metadata.version,
                digest=metadata.digest,
            )
        else:
            raise OwnershipMismatchError(
                metadata.object_id, "shared, address-owned or immutable", ownership.value
            )

        logger.debug(
            "Resolved {} as {} (version {})", metadata.object_id, ownership.value, metadata.version
        )
        return arg

    async def resolve_shared(self, address: str, mutable: bool = True) -> SharedObjectArg:
        """Resolve an object that must be shared (pools, managers, the clock)."""
        arg = await self.resolve(address, mutable=mutable, expected=Ownership.SHARED)
        return cast(SharedObjectArg, arg)

    async def resolve_owned(self, address: str) -> OwnedObjectArg:
        """Resolve an object that must be owned by an address (trade caps, coins)."""
        arg = await self.resolve(address, expected=Ownership.ADDRESS_OWNED)
        return cast(OwnedObjectArg, arg)
