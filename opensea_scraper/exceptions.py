"""Custom exceptions for the OpenSea scraper."""


class ScraperError(Exception):
    """Base exception for scraper-related errors."""
    pass


class ScrapeTimeoutError(ScraperError):
    """A wait condition never resolved."""
    pass


class ChallengeTimeoutError(ScrapeTimeoutError):
    """The anti-bot verification screen did not clear in time."""
    pass


class ElementNotFoundError(ScraperError):
    """An expected interactive element is absent."""
    pass


class NextPageNotFoundError(ElementNotFoundError):
    """The rankings "next page" control could not be clicked."""
    pass


class MalformedDataError(ScraperError, ValueError):
    """A single scraped value could not be parsed."""
    pass
