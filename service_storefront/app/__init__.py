"""
Storefront client application package.
"""
