"""
Domain layer - roles, capabilities and domain exceptions.

Independent of the persistence technology used underneath.
"""
