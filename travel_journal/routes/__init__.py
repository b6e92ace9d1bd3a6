# Routes package init
"""
Travel Journal Backend — API Routes Package
=============================================

Route Inventory (all under /api):
    - auth.py:       POST /auth/login, POST /auth/register, GET /auth/profile
    - journal.py:    GET/POST /journal, PUT/DELETE /journal/{id},
                     GET /journal/country/{code}, GET /journal/status/{code},
                     GET /journal/stats
    - countries.py:  GET /countries, GET /countries/{code}
    - health.py:     GET /health

Routes are thin: extract input, resolve the caller, call a service, pick
the status code.
"""
