# Services package init
"""
Tourist Spot API — Services Layer
==================================

Service Inventory:
    - TokenIssuer (token_service.py): signs, verifies and transports session tokens
    - TouristSpotService (spot_service.py): CRUD and owner-scoped reads
    - AssetCleanup / CloudinaryAssetStore (asset_service.py): hosted image deletion

Services are plain objects built once by the application factory and handed
to routes through app.state; none of them is a module-level singleton.
"""
