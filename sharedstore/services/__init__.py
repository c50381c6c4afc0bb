# Services package init
"""
sharedstore: Services Layer
==============================

Service Inventory:
    - UserService:  list / get / create users over an AsyncSession
    - CacheService: write-then-read of the fixed message key

Services receive their store handle per call and hold no state of their
own, so one module-level instance of each is shared by all requests.
"""
