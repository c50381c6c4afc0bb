# Routes package init
"""
sharedstore: API Routes Package
==================================

Route Inventory:
    user service
    - users.py:   GET  /                (welcome)
                  GET  /users           (full listing, ascending id)
                  GET  /users/{id}      (single user)
                  POST /users           (create)
    - health.py:  GET  /health          (SELECT 1 probe)

    cache service
    - cache.py:   GET  /                (set-then-get round trip)
                  GET  /health          (PING probe)

Routes stay thin: extract input, call one service method, wrap the result.
Status codes for failures come from the exception handlers in main.py.
"""
