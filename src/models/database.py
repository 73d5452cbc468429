"""
Database setup and configuration using SQLAlchemy
Stores saved floor plans outside the drawing engine
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import os
from contextlib import contextmanager

from calculations.debug_logger import debug_logger

# Create base class for declarative models
Base = declarative_base()

# Global session factory
SessionLocal = None
engine = None

DEFAULT_DATA_DIR = os.path.join("~", "Documents", "FloorPlanner")
DEFAULT_DB_NAME = "floor_plans.db"


def ensure_user_data_directory():
	"""Create and return the directory holding the plan database"""
	user_dir = os.path.expanduser(DEFAULT_DATA_DIR)
	os.makedirs(user_dir, exist_ok=True)
	return user_dir


def initialize_database(db_path=None):
	"""Initialize the database connection and create tables

	With no explicit path the custom path from the settings is used, falling
	back to Documents/FloorPlanner/floor_plans.db.
	"""
	global engine, SessionLocal

	if db_path is None:
		# Check for custom database path from settings
		try:
			from utils.settings_manager import get_settings_manager
			custom_path = get_settings_manager().get_database_path()
			if custom_path:
				db_path = custom_path
				debug_logger.info('Database', f"Using custom database path from settings: {db_path}")
		except RuntimeError as e:
			debug_logger.warning('Database', "Could not load custom database path from settings", {'error': str(e)})

		if db_path is None:
			db_path = os.path.join(ensure_user_data_directory(), DEFAULT_DB_NAME)

	db_path = str(db_path)
	new_url = f'sqlite:///{db_path}'

	# If engine already exists and is using the same path, don't reinitialize
	if engine is not None:
		if str(engine.url) == new_url:
			return db_path
		debug_logger.warning('Database', "Database path changed, reinitializing",
			{'old': str(engine.url), 'new': new_url})
		engine.dispose()

	engine = create_engine(new_url, echo=False)

	# expire_on_commit=False keeps loaded attributes usable after the session closes
	SessionLocal = sessionmaker(
		autocommit=False,
		autoflush=False,
		expire_on_commit=False,
		bind=engine,
	)

	# Import all models to ensure they're registered
	from . import floor_plan  # noqa: F401

	Base.metadata.create_all(bind=engine)
	debug_logger.info('Database', "Database initialized", {'path': db_path})
	return db_path


def get_session():
	"""Get a new database session"""
	if SessionLocal is None:
		raise RuntimeError("Database not initialized. Call initialize_database() first.")
	return SessionLocal()


@contextmanager
def session_scope():
	"""Session that commits on success and rolls back and re-raises on error

	Usage:
		with session_scope() as session:
			session.add(plan)
	"""
	session = get_session()
	try:
		yield session
		session.commit()
	except Exception as e:
		session.rollback()
		debug_logger.error('Database', "Session rolled back", e)
		raise
	finally:
		session.close()


def close_database():
	"""Close the database connection"""
	global engine, SessionLocal
	if engine:
		engine.dispose()
		engine = None
	SessionLocal = None
