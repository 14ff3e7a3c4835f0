# Routes package init
"""
Futelt Backend — API Routes Package
=====================================

Route Inventory:
    - messages.py: POST /messages  (append a message)
                   GET  /messages  (list all messages, newest first)
    - health.py:   GET  /health    (liveness probe)
    - index.py:    GET  /          (bundled HTML client)

Routes stay thin: parse the request, call the store, return a response
model. Error mapping lives in main.register_exception_handlers().
"""
