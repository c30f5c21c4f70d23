"""
Webinar records: domain types, boundary schemas, validation and phone normalization.
"""
