# Middleware package init
"""
Tourenplan Backend — Middleware Package
========================================

Middleware Chain (request direction):
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id in a ContextVar and the X-Request-ID header
    2. Access Log: one line per request with status and duration
    3. GZip/CORS: Starlette/FastAPI built-ins configured in main.py
"""
