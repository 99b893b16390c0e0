"""
Case catalog: public case summaries merged with the user's access requests.

The merged view is an immutable snapshot replaced wholesale on every
successful refresh. Readers holding an older snapshot keep a consistent
view; a failed refresh leaves the current snapshot in place.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterable, Iterator, Optional, Sequence, Tuple, TypeVar

from casevault.api.cases import CaseService
from casevault.core.logging import get_logger
from casevault.models import AccessRequest, CaseSummary, Entitlement
from casevault.services.operation import OperationState

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CatalogEntry:
    case: CaseSummary
    entitlement: Entitlement
    request: Optional[AccessRequest] = None


@dataclass(frozen=True)
class CatalogSnapshot:
    entries: Tuple[CatalogEntry, ...] = ()
    requests: Dict[str, AccessRequest] = field(default_factory=dict)
    generation: int = 0
    # issue ticket of the refresh that produced this snapshot
    ticket: int = 0

    @classmethod
    def merge(
        cls,
        cases: Sequence[CaseSummary],
        requests: Sequence[AccessRequest],
        generation: int,
        ticket: int = 0,
    ) -> "CatalogSnapshot":
        """
        Merge case summaries with access requests keyed by case id.

        When a case appears more than once in the request list the last
        occurrence is taken as the most recent one.
        """
        latest: Dict[str, AccessRequest] = {}
        for request in requests:
            latest[request.case_id] = request

        entries = tuple(
            CatalogEntry(
                case=case,
                entitlement=Entitlement.from_status(
                    latest[case.id].status if case.id in latest else None
                ),
                request=latest.get(case.id),
            )
            for case in cases
        )
        return cls(entries=entries, requests=latest, generation=generation, ticket=ticket)

    def entitlement(self, case_id: str) -> Entitlement:
        request = self.requests.get(case_id)
        return Entitlement.from_status(request.status if request else None)


class TitleFilter(Generic[T]):
    """
    Lazy, restartable view of items whose title contains a search term.

    Matching is a case-insensitive substring test; source order is kept.
    Every iteration starts over from the source it was created with.
    """

    def __init__(self, items: Iterable[T], term: str, title: Callable[[T], str]):
        self._items = items
        self.term = term or ""
        self._needle = self.term.casefold()
        self._title = title

    def __iter__(self) -> Iterator[T]:
        for item in self._items:
            if self._needle in self._title(item).casefold():
                yield item


class CaseCatalog:
    """Entitlement view over all publicly listed cases."""

    def __init__(self, cases: CaseService):
        self.cases = cases
        self.snapshot = CatalogSnapshot()
        self.state = OperationState.idle()
        self._issued = 0
        self._committed = 0

    @property
    def issued(self) -> int:
        """Ticket of the most recently started refresh."""
        return self._issued

    async def refresh(self) -> CatalogSnapshot:
        """
        Reload case summaries and access requests concurrently.

        Both fetches must succeed; on any failure the first error is raised
        and the previous snapshot stays visible. Overlapping refreshes are
        allowed; a result never replaces a snapshot from a later refresh.

        Raises:
            FetchError: If either fetch fails
        """
        self._issued += 1
        ticket = self._issued
        self.state = OperationState.started()

        cases, requests = await asyncio.gather(
            self.cases.list_public_cases(),
            self.cases.list_my_requests(),
            return_exceptions=True,
        )
        for outcome in (cases, requests):
            if isinstance(outcome, BaseException):
                logger.error(f"Catalog refresh failed: {outcome}")
                if ticket == self._issued:
                    self.state = OperationState.failed_with(str(outcome))
                raise outcome

        if ticket > self._committed:
            self._committed = ticket
            self.snapshot = CatalogSnapshot.merge(
                cases, requests, generation=self.snapshot.generation + 1, ticket=ticket
            )
            logger.debug(
                f"Catalog refreshed: {len(self.snapshot.entries)} cases, "
                f"{len(self.snapshot.requests)} requests"
            )
        if ticket == self._issued:
            self.state = OperationState.succeeded()
        return self.snapshot

    def entitlement(self, case_id: str) -> Entitlement:
        return self.snapshot.entitlement(case_id)

    def filter(self, term: str) -> TitleFilter[CatalogEntry]:
        return TitleFilter(self.snapshot.entries, term, lambda entry: entry.case.title)
