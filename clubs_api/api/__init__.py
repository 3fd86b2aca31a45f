"""FastAPI application (clubs_api.api.main) and its routers."""
