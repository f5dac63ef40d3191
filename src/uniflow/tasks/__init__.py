"""
Task subsystem.

Components:
- task_models.py: data structures (Task, SubTask, Priority, Category, FilterType)
- storage.py: key-value slots the collection is persisted into
- task_store.py: in-memory collection + mutations, written through on every change
- task_views.py: pure filter/sort/stats derivations for display
- task_api.py: detached advisory calls merged back by task id
"""
