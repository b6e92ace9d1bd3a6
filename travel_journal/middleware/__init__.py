# Middleware package init
"""
Travel Journal Backend — Middleware Package
=============================================

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject abusive requests before any processing
    2. Request ID: correlation id for logs and error bodies
    3. Access Log: one line per request with status, duration and caller
"""
