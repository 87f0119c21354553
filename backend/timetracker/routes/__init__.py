# Routes package init
"""
TimeTracker Backend - API Routes Package
=========================================

What:  HTTP route handlers for the four resources plus the health check.

Route Inventory (every resource router lives under /api/v{version}, v1 or v2):
    - clients.py:       /clients, /clients/{client_id}
    - projects.py:      /projects, /projects/{project_id}
    - users.py:         /users, /users/{user_id}
    - time_entries.py:  /time-entries, /time-entries/{entry_id},
                        /time-entries/{user_id}/{year}/{month}
    - health.py:        GET /health (unversioned, no auth)

Each resource router exposes:
    GET    /{resource}?page=&size=   paged list                 200
    GET    /{resource}/{id}          single item                200 / 404
    POST   /{resource}               create (Admin)             201 + Location / 404
    PUT    /{resource}/{id}          full replace (Admin)       200 / 404
    DELETE /{resource}/{id}          delete with cascade (Admin) 200 / 404

Routes stay thin: extract input, call the service, set status and headers.
"""
