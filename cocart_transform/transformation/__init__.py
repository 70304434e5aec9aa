"""
Transformation Layer - Pure, Deterministic Functions

This layer rewrites decoded API responses for display.
- Currency pass: amounts in minor units -> formatted strings
- Timezone pass: store-zone date strings -> target-zone date strings
- Pure functions (input -> new output, input never mutated)
- No I/O operations, never raises for bad data
"""
