# Routes package init
"""
Tourist Spot API — API Routes Package
======================================

Route Inventory:
    - auth.py:    POST /jwt, POST /jwt-logout         (session cookie)
    - spots.py:   /tourist-spot CRUD + owner listing
    - health.py:  GET /, GET /health

Routes stay thin: extract path/body values, call a service, wrap the result
in the response envelope. Errors are raised, never formatted here.
"""
