"""Category strategy records.

Each module declares the field-mapping table, required fields, and payload
builder of one or more categories as ``CategorySpec`` values.
"""
