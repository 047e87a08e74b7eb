"""Infrastructure: cache stores and SQLAlchemy persistence."""
