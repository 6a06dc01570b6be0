"""
DocDesk: doctor roster and specialty administration backend

Keeps a roster of doctors and their medical specialties in a document
database, with the per-specialty doctor count maintained as the roster
changes.
"""

__version__ = "0.1.0"
__author__ = "DocDesk Team"
__description__ = "Doctor roster and specialty administration backend"
