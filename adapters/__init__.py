"""
Adapters package - External service connections.
Relational storage pool and the food-recognition inference client.
"""

from adapters import inference_adapter, sql_adapter

__all__ = [
    "inference_adapter",
    "sql_adapter",
]
