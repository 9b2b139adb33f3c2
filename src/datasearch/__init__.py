"""datasearch — Backend-agnostic search queries over Elasticsearch-compatible engines."""

from datasearch.models.item import Item
from datasearch.models.paginator import Paginator
from datasearch.models.query import Query
from datasearch.models.result import FacetValue, Results

__version__ = "0.1.0"

__all__ = ["FacetValue", "Item", "Paginator", "Query", "Results", "__version__"]
