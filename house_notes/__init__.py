"""
House Life Notes.

Home maintenance records (house, rooms, appliances with repairs and
attachments, exterior features and maintenance) kept in a hosted Supabase
store, with a cost dashboard aggregated from those records.

Layering::

    main.py (composition + CLI)
      -> house_notes.services      record editors, cost aggregation, auth
      -> house_notes.repositories  hosted table access, ownership checks
      -> house_notes.models        pydantic row and result models
"""

__version__ = "0.1.0"
