"""
Orchestration Layer - Request Coordination

This layer wires the extract and transformation layers together.
- Fetch via the extract layer
- Apply the timezone pass, then the currency pass
- Holds the client's transformation settings
"""
