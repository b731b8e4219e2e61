from .exceptions import CatalogValidationError, QuoteBuilderError, SettingsValidationError
from .pricing_engine import compute_quote, convert
from .quote_processor import QuoteProcessor, export_quote
from .quote_session import QuoteSession
from .service_catalog import ServiceCatalog, reconcile_line_items
