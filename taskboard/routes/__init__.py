"""
Route blueprints for the taskboard frontend.

Contains:
- views: HTML routes for the task form and list
"""
