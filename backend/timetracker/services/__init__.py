"""
TimeTracker Backend - Services Layer
=====================================

What:  Resource operations sitting between routes (HTTP) and the database.
How:   One stateless service per resource, each exposed as a module-level
       singleton. Methods take the request's AsyncSession as their first
       argument and return response schemas.

Service Inventory:
    - ClientService:     list / get / create / update / delete
    - ProjectService:    same five, validating the referenced client
    - UserService:       same five
    - TimeEntryService:  same five, plus the per-user monthly listing;
                         captures the user's hour rate on create
"""
