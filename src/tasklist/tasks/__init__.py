"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskPatch) and validation
- task_store.py: in-memory ordered store + CRUD/query helpers
- task_codec.py: '|'-delimited text format and file load/save
- errors.py: ValidationError, NotFoundError, MalformedRecordError, ResourceUnavailableError
"""
