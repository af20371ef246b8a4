"""Infrastructure adapters: HTTP, web scraping and observability."""
