# Services package init
"""
Rabbitry Backend — Services Layer
==================================

What:  Business logic between the routes (HTTP) and the database.
How:   BreedService owns sessions and transactions; BreedDao issues the
       individual statements inside the transaction it is handed.

Service Inventory:
    - BreedService: list/get/add/modify/delete of breed aggregates
    - BreedDao: one method per SQL statement on breed, category, alt_name
      and breed_category
"""
