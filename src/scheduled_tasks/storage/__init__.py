"""Postgres (psycopg) and Redis collaborators used by the stats tasks."""
