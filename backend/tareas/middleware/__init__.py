# Middleware package init
"""
Tareas Backend: Middleware Package
==================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Auth Rate Limit] → [Session Guard] → [CORS] → Route

    1. Request ID first: every later log line carries the correlation ID
    2. Logging: records status and duration of everything below it,
       including rate-limit rejections and guard redirects
    3. Auth Rate Limit: only POST /login and POST /register are counted
    4. Session Guard: redirects unauthenticated requests for protected
       pages before any handler or template runs. The route guards check
       again, so this layer is never the only check.
"""
