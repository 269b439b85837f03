"""
Tourist Spot API — Application Package Initializer
===================================================

What: Marks the `tourist_spot` directory as a Python package.
Who:  Imported by uvicorn (`tourist_spot.main:app`), pytest, and every module
      using `from tourist_spot.config import settings`.

Architecture Note:
    ┌─────────────────────────────────────┐
    │     Routes + AuthGuard (HTTP)       │  ← status codes, cookies, envelopes
    ├─────────────────────────────────────┤
    │  Services (tokens, spots, assets)   │  ← lifecycle and ownership rules
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← document model + DTOs
    ├─────────────────────────────────────┤
    │   Database (MongoDB) / Cloudinary   │  ← external collaborators
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
