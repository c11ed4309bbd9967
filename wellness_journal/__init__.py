"""
Wellness journal: daily health records, calendar and dashboard API with
AI feedback. Storage and sign-in live in Supabase.
"""

__version__ = "0.1.0"
