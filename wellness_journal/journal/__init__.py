"""
Journal logic: drink units, sleep windows, calendar buckets, record forms.

Nothing in this package should talk directly to Flask, Supabase or OpenAI.
It is pure logic.
"""
