"""
Domain records and API schemas.

Records mirror persisted rows independent of the storage engine; the
request/response schemas define the caller-facing contracts.
"""
