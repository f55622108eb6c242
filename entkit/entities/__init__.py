"""
Concrete entity types.

Each type lives in two modules:
- <type>_schema: the field definitions (single source of truth)
- <type>: the entity class and its accessor pair

The schema modules import nothing from the database layer so the
database can declare its tables from them.
"""
