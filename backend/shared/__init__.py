"""
Shared module for common utilities across the REST API and the WS gateway.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: OrderStatus, transitions, event types, limits

- shared.infrastructure: Database and request tracing
  - db.py: SQLAlchemy engine/sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and log filter

- shared.security: Rate limiting (slowapi)

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Table identifier canonicalization
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import OrderStatus, EventType
    from shared.utils.exceptions import OrderNotFoundError
    from shared.utils.validators import canonical_table_id
"""
