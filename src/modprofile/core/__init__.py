"""Core domain logic package.

This package contains pure business logic for mod profiles, folders and
schema migration. Modules here must not import GUI frameworks (PySide6, Qt, etc.).
"""
