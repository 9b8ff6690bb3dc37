"""
Task subsystem.

Components:
- task_models.py: Task
- task_provider.py: task sources (tasks file, Makefile, composite)
- task_runner.py: subprocess executor
- watcher.py: polling loop for configuration and task file changes
"""
