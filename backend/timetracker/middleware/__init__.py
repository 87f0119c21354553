# Middleware package init
"""
TimeTracker Backend - Middleware Package
=========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [API Version] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID available to every later log line
    2. Logging: method, path, status and duration, tagged with the request ID
    3. API Version: api-supported-versions header on /api/ responses
    4. GZip / CORS: FastAPI's stock middleware

Rate limiting is not middleware here: limits differ per route, so they are
applied as route dependencies (see timetracker.rate_limiting).
"""
