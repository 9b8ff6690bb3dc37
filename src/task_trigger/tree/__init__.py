"""
Task tree.

Components:
- name_parser.py: split a task name into (folder, display name)
- grouper.py: build the source -> folder -> task hierarchy
- collapse.py: mark large folders as collapsed
- nodes.py: node types (TaskNode, FolderNode) and TreeItem
- model.py: TaskTreeModel, the tree data provider used by connectors
"""
