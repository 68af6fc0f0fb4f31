"""
HTTP adapter: FastAPI application, routers and dependency injection.
"""
