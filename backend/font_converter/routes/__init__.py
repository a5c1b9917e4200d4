# Routes package init
"""
Font Converter Backend - API Routes Package
===========================================

Route Inventory:
    - health.py:   GET  /api/health
    - convert.py:  POST /api/convert
                   POST /api/batch-convert

Routes stay thin: read the upload, call the negotiator, shape the response.
"""
