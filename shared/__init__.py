"""
Shared module for common utilities used by the order API.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Order, item, table and routing status constants

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy sessions, safe_commit(), unique violation parsing
  - correlation.py: X-Request-ID middleware and logging filter

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging and error codes
  - schemas.py: Shared Pydantic schemas
  - decimals.py: Money arithmetic and Decimal -> float normalization

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import OrderStatus, ItemType
    from shared.utils.exceptions import NotFoundError, InvalidStateError
"""
