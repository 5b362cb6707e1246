# Routes package init
"""
Rabbitry Backend — API Routes Package
======================================

Route Inventory:
    - breeds.py:  /api/breeds          (list, add, modify)
                  /api/breeds/{id}     (get, delete)
    - health.py:  GET /health          (service health check)

Routes stay thin: parse the request, call BreedService, choose the success
status. Everything else lives in the service layer or the exception handlers.
"""
