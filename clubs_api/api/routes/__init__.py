"""
API route modules for the reference data.

This package contains subrouters for:
- Countries: country listing (with pending advisory message) and details
- Provinces: country-scoped listing, details, create, edit, delete
- Styles: listing, details, create, edit, delete

Routers are included from clubs_api.api.main (under the /api/v1 prefix).
"""
