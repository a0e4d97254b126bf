from typing import Any, AsyncContextManager, Callable, List, Optional, Protocol, runtime_checkable

from healthjobs.browser.driver import PageDriver
from healthjobs.core.models import Listing, SearchFilters, SourceResult

# Opens one browser session and yields its page driver
PageFactory = Callable[[], AsyncContextManager[PageDriver]]


@runtime_checkable
class SourceAdapter(Protocol):
    """
    Capability interface every external job source implements.

    Implementations are independent classes, not subclasses of a shared base:
    adding a source never touches the aggregation pipeline. search() and
    get_featured() must not raise; failures come back as a degraded
    SourceResult or an empty list.
    """

    name: str
    # Tag on external ids that routes detail lookups here; None for untagged ids
    id_prefix: Optional[str]

    async def search(self, filters: SearchFilters) -> SourceResult:
        """
        Query the source.
        Returns:
            SourceResult: raw records for this source, degraded on failure.
        """
        ...

    async def get_by_id(self, job_id: str) -> Optional[Any]:
        """
        Locate one raw record by its external id, or None.
        """
        ...

    async def get_featured(self, limit: int) -> List[Any]:
        """
        A handful of highlighted raw records for the featured listing.
        """
        ...

    def normalize(self, record: Any) -> Listing:
        """
        Convert one raw record into a canonical Listing tagged with this source.
        """
        ...
