# Middleware package init
"""
Tourist Spot API — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Access Log] → [Security Headers]
            → [GZip] → [CORS] → Route Handler

    1. Rate Limit FIRST: Reject abusive requests before any processing
    2. Access Log: assigns the request id, then logs the finished request
       with its session outcome
    3. Security Headers: helmet-style response hardening
    4. GZip / CORS: FastAPI's built-in middleware
"""
