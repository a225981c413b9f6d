"""URL templates for the pages the scraper visits."""

DEFAULT_BASE_URL = "https://opensea.io"

# Query flags are kept literal; the site expects the brackets unencoded.
COLLECTION_QUERY = (
    "search[sortAscending]=true"
    "&search[sortBy]=PRICE"
    "&search[toggles][0]=BUY_NOW"
)


def collection_url(slug: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """Listing URL for a collection, cheapest buy-now items first."""
    if not slug:
        raise ValueError("Collection slug must not be empty")
    return f"{base_url.rstrip('/')}/collection/{slug}?{COLLECTION_QUERY}"


def rankings_url(base_url: str = DEFAULT_BASE_URL) -> str:
    """Rankings URL sorted by total volume, descending."""
    return f"{base_url.rstrip('/')}/rankings?sortBy=total_volume"
