"""Read-only access to the content store"""
