"""
Floor Plan - Saved floor plans and the manager that stores engine snapshots
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, JSON
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime
from .database import Base

from calculations.debug_logger import debug_logger


ENTITY_KEYS = ('walls', 'rooms', 'doors', 'texts', 'products')


class FloorPlan(Base):
	"""One saved plan; the entity collections are kept as a JSON document"""
	__tablename__ = 'floor_plans'

	id = Column(Integer, primary_key=True)
	name = Column(String(255), nullable=False)

	# Scale the coordinates were stored at (pixels per mm)
	scale = Column(Float, default=0.15)
	grid_size_mm = Column(Float, default=100.0)

	entities = Column(JSON, nullable=False, default=dict)

	created_date = Column(DateTime, default=datetime.utcnow)
	modified_date = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

	def __repr__(self):
		return f"<FloorPlan(id={self.id}, name='{self.name}')>"

	def entity_counts(self):
		data = self.entities or {}
		return {key: len(data.get(key, [])) for key in ENTITY_KEYS}

	def to_dict(self):
		return {
			'id': self.id,
			'name': self.name,
			'scale': self.scale,
			'grid_size_mm': self.grid_size_mm,
			'entities': self.entities or {},
			'created_date': self.created_date.isoformat() if self.created_date else None,
			'modified_date': self.modified_date.isoformat() if self.modified_date else None,
		}


class FloorPlanManager:
	"""Manager class for saving/loading floor plans"""

	def __init__(self, session_factory):
		self.get_session = session_factory

	def save_plan(self, name, entities, scale=0.15, grid_size_mm=100.0, plan_id=None):
		"""Create a plan, or overwrite ``plan_id``. Returns the plan id."""
		session = self.get_session()
		try:
			document = {key: list(entities.get(key, [])) for key in ENTITY_KEYS}

			plan = session.get(FloorPlan, plan_id) if plan_id is not None else None
			if plan_id is not None and plan is None:
				raise KeyError(f"Floor plan {plan_id} does not exist")
			if plan is None:
				plan = FloorPlan(name=name)
				session.add(plan)

			plan.name = name
			plan.scale = scale
			plan.grid_size_mm = grid_size_mm
			plan.entities = document

			session.commit()
			debug_logger.info('FloorPlanManager', "Plan saved", {'id': plan.id, 'name': name})
			return plan.id

		except SQLAlchemyError as e:
			session.rollback()
			debug_logger.error('FloorPlanManager', "Saving plan failed", e)
			raise
		finally:
			session.close()

	def load_plan(self, plan_id):
		"""Return the plan as a dict, or None when it does not exist"""
		session = self.get_session()
		try:
			plan = session.get(FloorPlan, plan_id)
			return plan.to_dict() if plan else None
		finally:
			session.close()

	def list_plans(self):
		"""Summaries of every plan, most recently modified first"""
		session = self.get_session()
		try:
			plans = session.query(FloorPlan).order_by(FloorPlan.modified_date.desc(), FloorPlan.id.desc()).all()
			return [
				{
					'id': plan.id,
					'name': plan.name,
					'modified_date': plan.modified_date.isoformat() if plan.modified_date else None,
					'counts': plan.entity_counts(),
				}
				for plan in plans
			]
		finally:
			session.close()

	def delete_plan(self, plan_id):
		session = self.get_session()
		try:
			plan = session.get(FloorPlan, plan_id)
			if plan is None:
				return False
			session.delete(plan)
			session.commit()
			return True
		except SQLAlchemyError as e:
			session.rollback()
			debug_logger.error('FloorPlanManager', "Deleting plan failed", e)
			raise
		finally:
			session.close()
