# Services package init
"""
Font Converter Backend - Services Layer
=======================================

What:  Everything between the HTTP routes and the font library.

Service Inventory:
    - FontConverter (abstract): container detection + conversion contract
    - FontToolsConverter: concrete implementation on fontTools TTFont
    - UploadService: extension, size and batch-count checks on uploads
    - FormatNegotiator: no-op rules, token mapping, batch partial failure
"""
