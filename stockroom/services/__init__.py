"""
Services Layer
Read-side query helpers used primarily by routes.

Services should:
- Not mutate stock or order state (that belongs to stockroom.business)
- Read from multiple models to aggregate information for a single owner scope
- Be stateless
"""
