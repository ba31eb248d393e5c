"""
Resilient periodic-task runner for database statistics.

Subpackages:
- scheduler: alignment, instrumentation, failure isolation, the interval loop
- stats: the task bodies and the fixed task list
- storage: Postgres and Redis collaborators
- reporting: Sentry error tracker
- cli: entry point and composition root
"""
