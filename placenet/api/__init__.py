"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from placenet.api.routes import api_router, ws_router
    app.include_router(api_router, prefix="/api")
    app.include_router(ws_router)
"""
