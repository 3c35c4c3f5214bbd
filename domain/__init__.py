"""
Domain layer - Table models, canonical records, record mappers, and enums.
"""
