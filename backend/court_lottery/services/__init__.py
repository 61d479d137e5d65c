"""
Services Layer

Business logic for requests, bookings and the court lottery:
- Accept domain inputs (ids, dates, slot keys) and a unit of work
- Return models or plain dicts
- Do NOT depend on HTTP request/response objects
- Raise court_lottery.errors exceptions for rejected operations
"""
