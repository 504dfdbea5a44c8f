from dataclasses import dataclass, field


@dataclass
class PageMetrics:
    """Track scraping metrics for each listings page."""
    page: int
    url: str = ""
    show_count: int = 0
    skipped_rows: int = 0
    errors: int = 0
    error_messages: list = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def success(self):
        return self.errors == 0


@dataclass
class ScrapeResult:
    """Everything one listings scrape run produced."""
    shows: list = field(default_factory=list)
    pages: list = field(default_factory=list)
    cancelled: bool = False

    @property
    def failed_pages(self):
        return [m.page for m in self.pages if not m.success]
