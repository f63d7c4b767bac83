"""
Module: core.ownership

Purpose:
    Keep foreign documents alive while pages borrowed from them remain
    referenced inside a host document. A borrowed page is not copied on
    insertion; its content is fetched from the original owner when the
    host is serialized, so the owner must outlive the reference.

Key Classes:
    - ReleasePolicy: When an unused keep-alive is dropped
    - OwnershipRegistry: Per-host map of foreign document -> borrowed pages

Key Functions:
    - registry_for(): Get (or attach) the registry of a host document

Used By:
    - core.pagelist: borrow on foreign insert, release on delete

Design Notes:
    The host holds its registry as a plain attribute; the registry holds
    each foreign document strongly. Nothing outside the host's object
    graph refers to the registry, so documents that borrow from each
    other form an ordinary cycle the garbage collector can reclaim.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Set

logger = logging.getLogger(__name__)


class ReleasePolicy(Enum):
    """
    Controls when a foreign document's keep-alive is dropped.

    Attributes:
        DEFERRED: Keep the strong reference after the last borrowed page is
                  deleted, until OwnershipRegistry.collect() is called.
        EAGER: Drop the strong reference as soon as the last borrowed page
               from that document is deleted.
    """

    DEFERRED = "deferred"
    EAGER = "eager"


@dataclass
class _Entry:
    """Strong reference to one foreign document plus its live borrows."""

    owner: Any
    pages: Set[Hashable] = field(default_factory=set)


class OwnershipRegistry:
    """
    Borrowed-page bookkeeping for a single host document.

    Entries are keyed on foreign document identity. An entry is created
    on the first borrow from a document and lives at least as long as
    any page borrowed from it remains in the host.

    Example:
        >>> registry = OwnershipRegistry(ReleasePolicy.EAGER)
        >>> registry.borrow(other_doc, page)
        >>> registry.borrowed_count(other_doc)
        1
        >>> registry.release(page)
        True
        >>> len(registry)
        0
    """

    def __init__(self, policy: ReleasePolicy = ReleasePolicy.DEFERRED) -> None:
        self.policy = policy
        self._entries: Dict[int, _Entry] = {}
        self._page_owner: Dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, owner: Any) -> bool:
        return id(owner) in self._entries

    def owners(self) -> List[Any]:
        """Return the foreign documents currently kept alive."""
        return [entry.owner for entry in self._entries.values()]

    def borrowed_count(self, owner: Any) -> int:
        """Number of pages from owner still referenced by the host."""
        entry = self._entries.get(id(owner))
        return len(entry.pages) if entry is not None else 0

    def is_borrowed(self, page: Hashable) -> bool:
        return page in self._page_owner

    def borrow(self, owner: Any, page: Hashable) -> None:
        """
        Record that page (as it now appears in the host) belongs to owner.

        Args:
            owner: Foreign document that holds the page's content.
            page: Page handle as found in the host after insertion.
        """
        key = id(owner)
        entry = self._entries.get(key)
        if entry is None:
            entry = _Entry(owner=owner)
            self._entries[key] = entry
            logger.debug(f"Keeping foreign document {owner!r} alive")
        entry.pages.add(page)
        self._page_owner[page] = key

    def release(self, page: Hashable) -> bool:
        """
        Forget a borrowed page that was removed from the host.

        Under ReleasePolicy.EAGER the owner's keep-alive is dropped when
        this was its last borrowed page.

        Args:
            page: Page handle being removed from the host.

        Returns:
            True if page was a borrowed page, False otherwise.
        """
        key = self._page_owner.pop(page, None)
        if key is None:
            return False
        entry = self._entries[key]
        entry.pages.discard(page)
        if not entry.pages and self.policy is ReleasePolicy.EAGER:
            del self._entries[key]
            logger.debug(f"Released foreign document {entry.owner!r}")
        return True

    def collect(self) -> int:
        """
        Drop every keep-alive with no remaining borrowed pages.

        Returns:
            Number of foreign documents released.
        """
        unused = [key for key, entry in self._entries.items() if not entry.pages]
        for key in unused:
            logger.debug(f"Released foreign document {self._entries[key].owner!r}")
            del self._entries[key]
        return len(unused)


REGISTRY_ATTR = "_pagelist_registry"


def registry_for(
    host: Any,
    policy: Optional[ReleasePolicy] = None,
) -> OwnershipRegistry:
    """
    Return the ownership registry attached to host, creating it if needed.

    Args:
        host: Host document (must accept new attributes).
        policy: Release policy to apply. Only honoured when the registry is
            created; a different policy for an existing registry is logged
            and ignored.

    Returns:
        The host's OwnershipRegistry.
    """
    registry = getattr(host, REGISTRY_ATTR, None)
    if registry is None:
        registry = OwnershipRegistry(policy or ReleasePolicy.DEFERRED)
        setattr(host, REGISTRY_ATTR, registry)
    elif policy is not None and policy is not registry.policy:
        logger.warning(
            f"Ignoring release policy {policy.value!r} for {host!r}: "
            f"registry already uses {registry.policy.value!r}"
        )
    return registry
