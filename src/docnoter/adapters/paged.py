"""Adapter for paginated documents."""

from collections.abc import Sequence

from docnoter.adapters.base import BaseAdapter
from docnoter.errors import LocationContractError
from docnoter.models.location import DocumentKind, Location, Paged, Viewport


class PagedAdapter(BaseAdapter):
    """A viewer showing one page at a time. Pages are numbered from 1.

    Navigation events fire on page changes only.
    """

    kind = DocumentKind.PAGED

    def __init__(self, document_id: str | None, pages: Sequence[str], *, page: int = 1) -> None:
        super().__init__(document_id)
        if not pages:
            msg = "A paged document needs at least one page"
            raise ValueError(msg)
        self.pages = list(pages)
        self.page = self._check_page(page)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def _check_page(self, page: int) -> int:
        if not 1 <= page <= len(self.pages):
            msg = f"Page {page} out of range 1-{len(self.pages)}"
            raise ValueError(msg)
        return page

    def get_current_location(self) -> Paged:
        return Paged(page=self.page)

    def navigate_to(self, location: Location) -> None:
        if not isinstance(location, Paged):
            msg = f"{type(self).__name__} cannot navigate to {location!r}"
            raise LocationContractError(msg)
        page = self._check_page(location.page)
        if page == self.page:
            return
        self.page = page
        self._log_move(f"page {page}")
        self._emit()

    def turn_page(self, delta: int = 1) -> None:
        """Move by ``delta`` pages, stopping at the first and last page."""
        target = min(max(self.page + delta, 1), len(self.pages))
        self.navigate_to(Paged(page=target))

    def get_viewport_bounds(self) -> Viewport | None:
        return None

    def read_range(self, begin: int, end: int) -> str | None:
        text = self.pages[self.page - 1]
        if not 0 <= begin <= end <= len(text):
            return None
        return text[begin:end]
