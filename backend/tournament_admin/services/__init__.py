"""
Services Layer

Business logic for registrations and match results that:
- Accept domain inputs (IDs, participant refs) and an explicitly passed engine
- Return domain outputs (models, dataclasses) or raise services.errors.CoreError
- Do NOT depend on HTTP request/response objects
- Open and own their transactions; callers never hold a session across calls
"""
