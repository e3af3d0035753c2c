"""
mp_search – search request/response translation layer.

Import path convention::

    from mp_search.search import HandlerRegistry, SearchRequestHandler
    from mp_search.search.filters import Criterion, Filter
    from mp_search.search import SearchConfiguration
    from mp_search.config import EnvSettingsLoader, SettingsFactory
    from mp_search.kernel.errors import CorruptedSearchDocumentError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
