"""
Restaurant POS order subsystem.

- models: SQLAlchemy ORM models (orders, routing records and the
  collaborator tables they read)
- repositories: data access with business unit isolation
- services.domain: order numbering, order lifecycle, kitchen/bar routing,
  table and menu collaborators
- services.actions: structured-result boundary used by UI callers
- routers: FastAPI endpoints over the same actions
"""
