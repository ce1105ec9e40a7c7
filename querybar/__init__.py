# querybar/__init__.py - Database panel of a request debug toolbar
"""
querybar collects the database queries executed during a request and
renders the Database panel of a debug toolbar.
"""

__version__ = "0.1.0"
