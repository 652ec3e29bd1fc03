"""Service layer for the content calendar.

Calendar math, the record store boundary, the query cache, view models and
the view state controller.
"""
