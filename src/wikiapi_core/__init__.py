"""wikiapi-core - request/response engine for the versioned MediaWiki XML API.

This library turns logical operations into chains of HTTP round trips:
- Actions: per-operation state machines producing request envelopes
- Pagination cursors: lazy, bounded-memory iteration over continued listings
- Version registry: dialect detection and per-action support sets
- XML response parsing with typed mapping of server errors

Example:
    ```python
    from wikiapi_core.client import WikiClient

    with WikiClient.from_env() as client:
        for title in client.all_page_titles():
            print(title)
    ```
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
