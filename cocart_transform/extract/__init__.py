"""
Extract Layer - Pure I/O to the CoCart API

This layer handles all HTTP fetching with no transformation logic.
- No imports from the transformation layer
- Returns decoded JSON exactly as the API sent it
- Handles retries and error propagation
"""
