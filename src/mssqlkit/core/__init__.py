"""
Core result types for mssqlkit.
"""
from .results import Err, Ok, Outcome, TabularResult, advance_to_result_set

__all__ = ["Err", "Ok", "Outcome", "TabularResult", "advance_to_result_set"]
