"""
Domain layer: entities, value objects, validators and pure metric services.
"""
