"""
Sales app: POS cart, checkout and invoices.
"""
