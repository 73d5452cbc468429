"""
Database models for saved floor plans
"""

from .database import Base, initialize_database, get_session, session_scope, close_database
from .floor_plan import FloorPlan, FloorPlanManager

__all__ = [
	'Base',
	'initialize_database',
	'get_session',
	'session_scope',
	'close_database',
	'FloorPlan',
	'FloorPlanManager',
]
