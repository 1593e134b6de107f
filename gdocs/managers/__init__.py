"""
Google Docs Operation Managers

Managers wrap the Docs service for the tools: resolving targets against a fetched
document, executing batch updates, and validating tool parameters.
"""

from .batch_operation_manager import BatchOperationManager, MAX_BATCH_UPDATE_REQUESTS
from .range_resolution_manager import RangeResolutionManager
from .validation_manager import ValidationManager

__all__ = [
    'BatchOperationManager',
    'MAX_BATCH_UPDATE_REQUESTS',
    'RangeResolutionManager',
    'ValidationManager',
]
