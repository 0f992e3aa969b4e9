"""
Version 1 of the Cashier API.
"""
