"""SmartQuote core - catalogue matching, waste estimation and route costing
for furniture installation quotes.

Typical use:

    from smartquote.container import Container
    from smartquote.ports import CatalogueStorePort
    from smartquote.services import QuoteLineProcessor

    container = Container.create_default()
    snapshot = container.resolve(CatalogueStorePort).load_snapshot()
    result = container.resolve(QuoteLineProcessor).process_batch(lines, snapshot)
"""

__version__ = "0.1.0"
